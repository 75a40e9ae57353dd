from binder.response.base import Base, Response
from binder.response.basic import Basic, Redirect
from binder.response.error import Error
from binder.response.json import JSON_CONTENT_TYPE, Json

__all__ = ["Base", "Basic", "Error", "JSON_CONTENT_TYPE", "Json", "Redirect", "Response"]
