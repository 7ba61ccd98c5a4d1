"""Services for voxrelay."""
