# Clients package init
from studyhub.clients.api_connector import api_connector, create_api_client

__all__ = ["api_connector", "create_api_client"]
