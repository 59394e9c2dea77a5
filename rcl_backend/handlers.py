"""Input handlers for the 'RCL Backend'-app."""

from data_plumber_http import Object, Property, String, Boolean

from rcl_backend.models import OperationType


def get_report_id_handler(required: bool = True):
    """
    Returns parameterized handler

    Keyword arguments
    required -- whether field 'id' is required
                (default True)
    """
    return Object(
        properties={
            Property("id", "id_", required=required): String(pattern=r".+")
        },
        accept_only=["id"],
    ).assemble()


sender_id_handler = Object(
    properties={
        Property("senderId", "sender_id", required=True): String(
            pattern=r".+"
        )
    },
    accept_only=["senderId"],
).assemble()


post_report_handler = Object(
    properties={
        Property("senderId", "sender_id", required=True): String(
            pattern=r".+"
        ),
        Property("version", default=""): String(pattern=r"^([0-9]+)?$"),
        Property("year"): String(pattern=r"^[0-9]{4}$"),
        Property("month"): String(pattern=r"^(0[1-9]|1[0-2])$"),
    },
    accept_only=["senderId", "version", "year", "month"],
).assemble()


send_report_handler = Object(
    properties={
        Property("id", "id_", required=True): String(pattern=r".+"),
        Property("operation"): String(
            enum=[
                operation.value
                for operation in OperationType
                if operation is not OperationType.NOT_SUPPORTED
            ]
        ),
        Property("emptyDataset", "empty_dataset", default=False): Boolean(),
    },
    accept_only=["id", "operation", "emptyDataset"],
).assemble()
