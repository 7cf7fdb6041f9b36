from uuid import UUID

from sqlalchemy.orm import Session

from foodcare.models.customer import Customer
from foodcare.schemas.customer import CustomerCreate


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, customer_id: UUID) -> Customer | None:
        return self.db.query(Customer).filter(Customer.id == customer_id).first()

    def get_by_ids(self, customer_ids: list[UUID]) -> dict[UUID, Customer]:
        if not customer_ids:
            return {}
        customers = self.db.query(Customer).filter(Customer.id.in_(customer_ids)).all()
        return {c.id: c for c in customers}  # type: ignore[misc]

    def create(self, data: CustomerCreate, customer_id: UUID | None = None) -> Customer:
        customer = Customer(
            email=data.email,
            full_name=data.full_name,
            phone_number=data.phone_number,
        )
        if customer_id is not None:
            customer.id = customer_id  # type: ignore[assignment]
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer
