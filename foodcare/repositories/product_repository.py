from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.product import Product
from foodcare.schemas.product import ProductCreate


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: UUID) -> Product | None:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_ids(self, product_ids: list[UUID]) -> dict[UUID, Product]:
        if not product_ids:
            return {}
        products = self.db.query(Product).filter(Product.id.in_(product_ids)).all()
        return {p.id: p for p in products}  # type: ignore[misc]

    def create(self, data: ProductCreate) -> Product:
        product = Product(
            name=data.name,
            base_price=data.base_price,
            image_url=data.image_url,
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product
