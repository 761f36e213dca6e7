import enum


class OrderStatus(str, enum.Enum):
    ORDER = "Order"
    PREPARING = "Preparing"
    SERVED = "Served"
    COMPLETED = "Completed"


class PaymentStatus(str, enum.Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


class PaymentMethod(str, enum.Enum):
    UPI = "UPI"
    CASH = "Cash"
    OTHER = "Other"


class FoodType(str, enum.Enum):
    VEG = "Veg"
    NON_VEG = "Non-Veg"
    OTHER = "Other"


class FoodSize(str, enum.Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HALF = "Half"
    FULL = "Full"


ORDER_STATUSES = [s.value for s in OrderStatus]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]
PAYMENT_METHODS = [m.value for m in PaymentMethod]
FOOD_TYPES = [t.value for t in FoodType]

# Tables 1-40 are dine-in, 0 is delivery/takeaway. Four chairs per table, indexed 0-3.
DELIVERY_TABLE = 0
MAX_TABLE_NUMBER = 40
CHAIRS_PER_TABLE = 4

PAGINATION = {
    "default_limit": 50,
    "max_limit": 100,
    "default_page": 1,
}


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    DB_CONNECTION_ERROR = "DB_CONNECTION_ERROR"
    DB_QUERY_ERROR = "DB_QUERY_ERROR"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    PAYMENT_NOT_CONFIGURED = "PAYMENT_NOT_CONFIGURED"
    PAYMENT_GATEWAY_ERROR = "PAYMENT_GATEWAY_ERROR"
    PUSH_NOT_CONFIGURED = "PUSH_NOT_CONFIGURED"
    SUBSCRIPTION_EXPIRED = "SUBSCRIPTION_EXPIRED"
    STORAGE_NOT_CONFIGURED = "STORAGE_NOT_CONFIGURED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


# Message reported for a field whenever it fails validation, keyed by the JSON field name
FIELD_MESSAGES = {
    "userEmail": "Valid email is required",
    "foodName": "Food name is required",
    "quantity": "Quantity must be a positive integer",
    "price": "Price must be a positive number",
    "tableNumber": f"Table number must be between 0 and {MAX_TABLE_NUMBER}",
    "chairIndices": f"Chair indices must be between 0 and {CHAIRS_PER_TABLE - 1}",
    "status": f"Status must be one of: {', '.join(ORDER_STATUSES)}",
    "paymentStatus": f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}",
    "paymentMethod": f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}",
    "type": f"Type must be one of: {', '.join(FOOD_TYPES)}",
}

# Push titles sent to the customer when an order moves to a new status
STATUS_MESSAGES = {
    OrderStatus.ORDER.value: "Your order has been placed",
    OrderStatus.PREPARING.value: "Your order is being prepared",
    OrderStatus.SERVED.value: "Your order has been served",
    OrderStatus.COMPLETED.value: "Your order is complete!",
}
