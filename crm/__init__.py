"""Max operator CRM engines."""
