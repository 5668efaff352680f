from crm.directives.models import ImageDirective, UnrecognizedVisual, VideoDirective, YouTubeDirective
from crm.visuals.models import ImagePayload, VideoPayload, YouTubePayload
from crm.visuals.resolver import VisualResolver


class _ImageStub:
    def __init__(self, url="data:image/png;base64,AAAA", exc=None):
        self.url = url
        self.exc = exc
        self.prompts = []

    def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.exc:
            raise self.exc
        return self.url


class _SearchStub:
    def __init__(self, result="vid123", exc=None):
        self.result = result
        self.exc = exc
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if self.exc:
            raise self.exc
        return self.result


def _resolver(images=None, search=None):
    return VisualResolver(image_generator=images or _ImageStub(), video_search=search or _SearchStub())


def test_image_directive_resolves_to_data_url():
    images = _ImageStub()
    payload = _resolver(images=images).resolve(ImageDirective(prompt="a red fox"))
    assert payload == ImagePayload(url="data:image/png;base64,AAAA", caption="")
    assert images.prompts == ["a red fox"]


def test_image_backend_failure_resolves_to_none():
    images = _ImageStub(exc=RuntimeError("quota exceeded"))
    assert _resolver(images=images).resolve(ImageDirective(prompt="x")) is None


def test_empty_image_result_resolves_to_none():
    assert _resolver(images=_ImageStub(url="")).resolve(ImageDirective(prompt="x")) is None


def test_video_passes_through():
    payload = _resolver().resolve(VideoDirective(url="https://cdn.test/v.mp4", caption="Demo"))
    assert payload == VideoPayload(url="https://cdn.test/v.mp4", caption="Demo")


def test_youtube_id_passes_through_without_search():
    search = _SearchStub()
    payload = _resolver(search=search).resolve(YouTubeDirective(id="abc123"))
    assert payload == YouTubePayload(id="abc123", caption="")
    assert search.queries == []


def test_youtube_search_uses_query_as_default_caption():
    search = _SearchStub(result="found42")
    payload = _resolver(search=search).resolve(YouTubeDirective(search="lofi beats"))
    assert payload == YouTubePayload(id="found42", caption="lofi beats")
    assert search.queries == ["lofi beats"]


def test_youtube_search_keeps_explicit_caption():
    payload = _resolver().resolve(YouTubeDirective(search="lofi beats", caption="Focus music"))
    assert payload.caption == "Focus music"


def test_youtube_search_without_results_resolves_to_none():
    assert _resolver(search=_SearchStub(result=None)).resolve(YouTubeDirective(search="nothing")) is None


def test_youtube_search_failure_resolves_to_none():
    search = _SearchStub(exc=RuntimeError("Missing YT_API_KEY"))
    assert _resolver(search=search).resolve(YouTubeDirective(search="cats")) is None


def test_unrecognized_and_missing_directives_resolve_to_none():
    resolver = _resolver()
    assert resolver.resolve(UnrecognizedVisual(raw={"type": "chart"}, reason="unsupported")) is None
    assert resolver.resolve(None) is None
