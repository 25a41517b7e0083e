from soil_sage.api.routes import router

__all__ = ["router"]
