from .rest_api_client import ClientResponse, DCFRestClient0

__all__ = [
    "ClientResponse",
    "DCFRestClient0",
]
