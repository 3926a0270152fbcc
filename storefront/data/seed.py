# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CategoryModel, ProductModel, UserModel


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        #tylko jesli pusto, bez nadpisywania
        if db.query(ProductModel).first():
            return

        audio = CategoryModel(name="Audio")
        desk = CategoryModel(name="Desk")
        db.add_all([audio, desk])
        db.flush()

        db.add_all([
            ProductModel(name="Wireless Headphones", price=Decimal("89.99"), category_id=audio.id, stock=25, featured=True),
            ProductModel(name="Bluetooth Speaker", price=Decimal("49.50"), category_id=audio.id, stock=40, on_sale=True),
            ProductModel(name="Mechanical Keyboard", price=Decimal("129.00"), category_id=desk.id, stock=12, featured=True),
            ProductModel(name="Desk Lamp", price=Decimal("24.00"), category_id=desk.id, stock=60),
        ])
        db.add(UserModel(id=1, name="Admin", email="admin@example.com", role="admin"))
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
