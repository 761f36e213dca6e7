from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def value_enum(cls, length: int = 20) -> Enum:
    # store the human-readable value ("Non-Veg"), not the member name
    return Enum(cls, values_callable=lambda e: [m.value for m in e], native_enum=False, length=length)
