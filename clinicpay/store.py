import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinicpay.errors import PersistenceError
from clinicpay.models import PaymentIntent, PaymentStatus

logger = logging.getLogger(__name__)


class PaymentStore:
    """Persistence for payment intents, bound to one SQLAlchemy session.

    Every ``SQLAlchemyError`` is rolled back and re-raised as
    ``PersistenceError``.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_order_code(self, order_code: str):
        try:
            return self.db.query(PaymentIntent).filter_by(order_code=order_code).first()
        except SQLAlchemyError as exc:
            self._fail("lookup", order_code, exc)

    def create(self, order_code: str, amount: int) -> PaymentIntent:
        """Insert a PENDING intent.

        A concurrent insert of the same order code makes the unique
        constraint fire; the row that won is returned instead.
        """
        payment = PaymentIntent(
            order_code=order_code,
            amount=amount,
            status=PaymentStatus.PENDING,
        )
        try:
            self.db.add(payment)
            self.db.commit()
            self.db.refresh(payment)
            return payment
        except IntegrityError as exc:
            self.db.rollback()
            existing = self.find_by_order_code(order_code)
            if existing is None:
                self._fail("create", order_code, exc)
            logger.info("Order %s was created concurrently, reusing it", order_code)
            return existing
        except SQLAlchemyError as exc:
            self._fail("create", order_code, exc)

    def mark_paid(self, order_code: str, transaction_id: str, description) -> bool:
        """Move an intent to PAID unless it already is.

        Runs as a single conditional UPDATE, so concurrent webhook and poll
        deliveries cannot both win. Returns True when this call made the
        transition.
        """
        stmt = (
            update(PaymentIntent)
            .where(PaymentIntent.order_code == order_code)
            .where(PaymentIntent.status != PaymentStatus.PAID)
            .values(
                status=PaymentStatus.PAID,
                transaction_id=transaction_id,
                description=description,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("mark_paid", order_code, exc)
        # Later reads in this session must see the new row state.
        self.db.expire_all()
        return result.rowcount == 1

    def _fail(self, operation, order_code, exc):
        self.db.rollback()
        logger.error("Payment store %s failed for %s: %s", operation, order_code, exc)
        raise PersistenceError(f"{operation} failed for {order_code}") from exc
