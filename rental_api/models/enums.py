from enum import Enum


class Role(str, Enum):
    admin = "ADMIN"
    owner = "OWNER"
    customer = "CUSTOMER"


class OrderStatus(str, Enum):
    pending_review = "PENDING_REVIEW"
    approved = "APPROVED"
    paid = "PAID"
    active = "ACTIVE"
    completed = "COMPLETED"
    canceled = "CANCELED"
    rejected = "REJECTED"


class PaymentMethod(str, Enum):
    bank_transfer_manual = "BANK_TRANSFER_MANUAL"
    cash = "CASH"
    credit_card = "CREDIT_CARD"
    e_wallet = "E_WALLET"


class VehicleType(str, Enum):
    sedan = "SEDAN"
    mpv = "MPV"
    suv = "SUV"
    hatchback = "HATCHBACK"
    pickup = "PICKUP"
    motorcycle = "MOTORCYCLE"


class TransmissionType(str, Enum):
    manual = "MANUAL"
    automatic = "AUTOMATIC"


class FuelType(str, Enum):
    gasoline = "GASOLINE"
    diesel = "DIESEL"
    electric = "ELECTRIC"
    hybrid = "HYBRID"
