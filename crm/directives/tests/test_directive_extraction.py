from crm.directives.extraction import extract_directives
from crm.directives.models import (
    CreateDocumentAction,
    CreateModelAction,
    ImageDirective,
    UnrecognizedAction,
    UnrecognizedVisual,
    VideoDirective,
    YouTubeDirective,
)
from crm.directives.normalize import normalize_action, normalize_visual


def test_plain_reply_passes_through():
    raw = "  Hello there, how can I help?  "
    out = extract_directives(raw)
    assert out.reply_text == raw.strip()
    assert out.visual is None
    assert out.action is None


def test_markdown_youtube_link_becomes_visual():
    out = extract_directives("Check this [here](https://youtu.be/abc123XYZ9) out")
    assert out.reply_text == "Check this out"
    assert out.visual == YouTubeDirective(id="abc123XYZ9")


def test_explicit_image_directive():
    out = extract_directives('Sure!\nVISUAL:{"type":"image","prompt":"a red fox"}')
    assert out.reply_text == "Sure!"
    assert out.visual == ImageDirective(prompt="a red fox")


def test_scraped_link_outranks_visual_directive():
    out = extract_directives(
        'Try [this](https://youtu.be/first12345)\nVISUAL:{"type":"image","prompt":"ignored"}'
    )
    assert out.visual == YouTubeDirective(id="first12345")
    assert out.reply_text == "Try"


def test_action_after_visual_line():
    out = extract_directives(
        "Done.\n"
        'VISUAL:{"type":"image","prompt":"chart"}\n'
        'ACTION:{"type":"create_model","name":"Deal","collection":"deal_records","fields":[]}'
    )
    assert out.reply_text == "Done."
    assert isinstance(out.visual, ImageDirective)
    assert isinstance(out.action, CreateModelAction)
    assert out.action.name == "Deal"


def test_action_only():
    out = extract_directives(
        'Creating it now.\nACTION:{"type":"create_document","model":"Deal","data":{"title":"Big"}}'
    )
    assert out.reply_text == "Creating it now."
    assert out.action == CreateDocumentAction(model="Deal", data={"title": "Big"})
    assert out.visual is None


def test_malformed_action_yields_no_action():
    out = extract_directives('On it.\nACTION:{"type":"create_model", name}')
    assert out.reply_text == "On it."
    assert out.action is None


def test_unknown_visual_type_is_explicitly_unrecognized():
    out = extract_directives('Look.\nVISUAL:{"type":"chart","data":[1,2]}')
    assert isinstance(out.visual, UnrecognizedVisual)


def test_normalize_visual_variants():
    assert normalize_visual({"type": "YT", "search": "cats"}) == YouTubeDirective(search="cats")
    assert normalize_visual({"type": "youtube", "q": "lofi", "caption": "Music"}) == YouTubeDirective(
        search="lofi", caption="Music"
    )
    assert normalize_visual({"type": "youtube", "url": "https://youtu.be/abc123"}) == YouTubeDirective(id="abc123")
    assert normalize_visual({"type": "video", "url": "https://cdn.test/v.mp4", "caption": "Demo"}) == VideoDirective(
        url="https://cdn.test/v.mp4", caption="Demo"
    )


def test_normalize_visual_rejects_ill_formed_shapes():
    assert isinstance(normalize_visual({"type": "image", "prompt": "   "}), UnrecognizedVisual)
    assert isinstance(normalize_visual({"type": "video", "url": "ftp://host/v.mp4"}), UnrecognizedVisual)
    assert isinstance(normalize_visual({"type": "youtube"}), UnrecognizedVisual)
    assert isinstance(normalize_visual({"prompt": "no type"}), UnrecognizedVisual)


def test_normalize_action_variants():
    invalid = normalize_action({"type": "create_model", "name": "Deal"})
    assert isinstance(invalid, UnrecognizedAction)
    assert invalid.intended == "create_model"

    bad_data = normalize_action({"type": "create_document", "model": "Deal", "data": "title"})
    assert isinstance(bad_data, UnrecognizedAction)
    assert bad_data.intended == "create_document"

    unknown = normalize_action({"type": "delete_everything"})
    assert isinstance(unknown, UnrecognizedAction)
    assert unknown.intended is None


def test_first_scraped_youtube_link_wins():
    out = extract_directives("Try https://youtu.be/first12345 or [this](https://youtu.be/second6789)")
    assert out.visual == YouTubeDirective(id="first12345")
    assert out.reply_text == "Try or"
