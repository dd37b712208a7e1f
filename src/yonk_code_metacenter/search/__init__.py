"""Search index template synthesis."""
from .es_template import SEARCH_HINT_TEXT, SearchTemplateSynthesizer

__all__ = ["SEARCH_HINT_TEXT", "SearchTemplateSynthesizer"]
