from .base import Base
from .mixins import PartyMixin


class Supplier(PartyMixin, Base):
    __tablename__ = "suppliers"
