from rationale.api.routes import create_app, get_explainer, router

__all__ = ["create_app", "get_explainer", "router"]
