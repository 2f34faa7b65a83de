"""
Endpoints, api versions and environment variable names shared by the service packages.
"""

MANAGEMENT_BASE_URL = "https://management.azure.com"
MANAGEMENT_SCOPE = "https://management.azure.com/.default"

# api versions of the REST APIs that azrest wraps
MYSQL_API_VERSION = "2018-06-01"
STORAGE_MANAGEMENT_API_VERSION = "2019-06-01"
DEPLOYMENT_SCRIPTS_API_VERSION = "2019-10-01-preview"
SUBSCRIPTIONS_API_VERSION = "2021-01-01"
QUEUE_API_VERSION = "2021-02-12"

MONITOR_DEFAULT_HOST = "https://dc.services.visualstudio.com"

# Header names
CLIENT_REQUEST_ID_HEADER = "x-ms-client-request-id"
REQUEST_ID_HEADER = "x-ms-request-id"

# Environment variables
AZURE_SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
AZURE_STORAGE_CONNECTION_STRING = "AZURE_STORAGE_CONNECTION_STRING"
# only read by the emulator tests
AZURITE_CONNECTION_STRING = "AZURITE_CONNECTION_STRING"

# the well-known development storage account used by Azurite and the older storage
# emulator
DEVELOPMENT_STORAGE_ACCOUNT_NAME = "devstoreaccount1"
DEVELOPMENT_STORAGE_ACCOUNT_KEY = (
    "Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw=="
)
DEVELOPMENT_STORAGE_QUEUE_ENDPOINT = "http://127.0.0.1:10001/devstoreaccount1"
