class CatalogError(Exception):
    """Base error rendered by the app as ``{"error": ..., "details": ...}``."""

    status_code = 500
    message = 'Internal server error'

    def __init__(self, details: str = None, message: str = None):
        super().__init__(details or message or self.message)
        if message:
            self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {'error': self.message}
        if self.details:
            body['details'] = self.details
        return body


class StoreUnavailable(CatalogError):
    status_code = 503
    message = 'Database error'


class NotFound(CatalogError):
    status_code = 404
    message = 'Pokémon not found'


class InvalidQuery(CatalogError):
    status_code = 400
    message = 'Invalid request'


class MalformedHistoryInput(InvalidQuery):
    message = 'Malformed history'


class DatasetError(CatalogError):
    message = 'Dataset could not be loaded'
