"""5Post Python SDK.

Client for the 5Post parcel delivery API: pickup points, warehouses,
orders and order statuses.

Basic Usage:
    ```python
    from fivepost_sdk import FivePost

    with FivePost(api_key="...") as client:
        points = client.get_pickup_points(size=100)
        history = client.get_order_statuses(order_id="my-order-1")
    ```

Reusing a token between processes:
    ```python
    client = FivePost(api_key="...")
    client.set_token(saved_token)
    ...
    saved_token = client.get_token()
    ```
"""

from .auth import (
    AuthInterceptor,
    TokenClaims,
    TokenManager,
    decode_token,
    get_api_key,
)
from .client import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    DataType,
    FivePost,
)
from .exceptions import (
    APIError,
    BusinessError,
    EmptyResponseError,
    FivePostError,
    InvalidArgumentError,
    MalformedTokenError,
    RemoteError,
    RemoteFaultError,
)
from .models import (
    Barcode,
    Cargo,
    Order,
    OrderCost,
    OrderIdentifier,
    ProductValue,
    Warehouse,
    WorkingHours,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "FivePost",
    "DataType",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "PRODUCTION_BASE_URL",
    "SANDBOX_BASE_URL",
    # Models
    "Barcode",
    "Cargo",
    "Order",
    "OrderCost",
    "OrderIdentifier",
    "ProductValue",
    "Warehouse",
    "WorkingHours",
    # Auth
    "AuthInterceptor",
    "TokenClaims",
    "TokenManager",
    "decode_token",
    "get_api_key",
    # Exceptions
    "FivePostError",
    "InvalidArgumentError",
    "MalformedTokenError",
    "APIError",
    "EmptyResponseError",
    "RemoteFaultError",
    "RemoteError",
    "BusinessError",
]
