from .base import Base
from .mixins import PartyMixin


class Customer(PartyMixin, Base):
    __tablename__ = "customers"
