"""Domain service: Stock Ledger.

Coordinates the cross-aggregate stock movements caused by an invoice:
taking sold units out of ``Product.quantity`` when it is created and
putting them back when it is deleted.

Taking stock is two-phase (validate-then-mutate) so a missing product or
an obvious shortage is reported before anything is written.  The writes
themselves go through ``ProductRepository.adjust_quantity``, a guarded
update that refuses to drive a counter negative, so a concurrent sale
that slipped in between the phases still cannot oversell; the refusal
surfaces as ``ConflictError`` and the surrounding unit of work rolls back.
"""

from __future__ import annotations

import logging

from clinic.domain.exceptions import ConflictError, EntityNotFoundError
from clinic.domain.model.invoice import Invoice
from clinic.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def take_for_invoice(self, invoice: Invoice) -> None:
        """Decrement stock for every product on the invoice."""
        quantities = invoice.quantities_by_product()

        # Phase 1: every product exists and has enough units on hand
        for product_id, qty in quantities.items():
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")
            if not product.can_supply(qty):
                raise ConflictError(
                    f"Insufficient stock for {product.name} "
                    f"(need {qty}, have {product.quantity})"
                )

        # Phase 2: guarded decrements
        for product_id, qty in quantities.items():
            if not self._product_repo.adjust_quantity(product_id, -qty):
                logger.warning(
                    "Stock decrement refused for product #%s (qty %s)", product_id, qty
                )
                raise ConflictError(
                    f"Stock for product #{product_id} changed while invoicing; "
                    f"not enough left for {qty}"
                )

    def restore_for_invoice(self, invoice: Invoice) -> None:
        """Return every invoiced unit to stock.

        Products deleted since the sale are skipped; the rest are still
        restored.
        """
        for product_id, qty in invoice.quantities_by_product().items():
            if not self._product_repo.adjust_quantity(product_id, qty):
                logger.warning(
                    "Skipping stock restore of %s unit(s) for missing product #%s "
                    "(invoice %s)",
                    qty,
                    product_id,
                    invoice.code,
                )
