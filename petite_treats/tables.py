"""
Relational tables backing the catalog.

``products``, ``macaron_flavors``, ``products_flavors`` and ``faq`` are
seeded once and only read through the API. ``feedback`` is keyed by
email, so the database itself rejects a second submission from the same
address.
"""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Declarative base for the catalog tables."""


class Product(Base):
    __tablename__ = "products"

    name = Column(String(255), primary_key=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    price = Column(Numeric(8, 2, asdecimal=False), nullable=False)
    description = Column(Text, nullable=False)
    # ${flavor} / ${box} placeholders; derived from description when NULL
    description_template = Column(Text, nullable=True)
    image = Column(String(255), nullable=False)

    flavors = relationship(
        "ProductFlavor",
        back_populates="product_row",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Product {self.name}>"


class MacaronFlavor(Base):
    __tablename__ = "macaron_flavors"

    name = Column(String(255), primary_key=True)
    description = Column(Text, nullable=False)
    image = Column(String(255), nullable=False)


class ProductFlavor(Base):
    __tablename__ = "products_flavors"

    product = Column(
        String(255),
        ForeignKey("products.name", onupdate="CASCADE", ondelete="CASCADE"),
        primary_key=True,
    )
    flavor = Column(String(255), primary_key=True)

    product_row = relationship("Product", back_populates="flavors")


class FAQEntry(Base):
    __tablename__ = "faq"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)


class Feedback(Base):
    __tablename__ = "feedback"

    email = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    def __repr__(self):
        return f"<Feedback {self.email}>"
