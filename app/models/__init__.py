from app.models.enums import DeclarationMethod, FxSource  # noqa: F401
