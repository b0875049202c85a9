"""
Catalog export service.

End-to-end export of canonical products: tier gate, serialization to the
requested format, and the downloadable artifact with its status message.
Failures come back as an ExportResult status, never as exceptions.
"""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from ..catalog.selection import Selection
from ..common.csv_utils import render_csv
from ..common.text_utils import export_basename
from ..errors import ExportEmptySetError
from ..models import CanonicalProduct
from ..shopify import SHOPIFY_MIME_TYPE, ShopifyCSVExporter
from ..woocommerce import WOOCOMMERCE_MIME_TYPE, WooCommerceCSVExporter
from .policy import DEFAULT_FREE_TIER_LIMIT, ExportPolicyGate, GateResult

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = 'application/json'


class ExportFormat(str, Enum):
    SHOPIFY = "shopify"
    WOOCOMMERCE = "woocommerce"
    JSON = "json"


class ExportStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    INVALID = "invalid"


FILENAME_SUFFIXES = {
    ExportFormat.SHOPIFY: '-shopify.csv',
    ExportFormat.WOOCOMMERCE: '-woocommerce.csv',
    ExportFormat.JSON: '-products.json',
}


@dataclass
class ExportArtifact:
    """Downloadable export file."""
    filename: str
    content: bytes
    mime_type: str

    def write(self, directory: str = '.') -> str:
        """
        Write the artifact into a directory.

        Args:
            directory: Target directory (created if missing)

        Returns:
            Path of the written file
        """
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, self.filename)
        with open(path, 'wb') as f:
            f.write(self.content)
        logger.info("Saved %s (%d bytes)", path, len(self.content))
        return path


@dataclass
class ExportResult:
    """Outcome of one export request."""
    status: ExportStatus
    message: str
    artifact: Optional[ExportArtifact] = None
    exported: int = 0   # Products serialized
    total: int = 0      # Candidate products before the tier gate
    rows: int = 0       # CSV data rows (0 for JSON)

    @property
    def ok(self) -> bool:
        return self.status == ExportStatus.OK

    @property
    def truncated(self) -> bool:
        return self.exported < self.total


class CatalogExporter:
    """
    Exports canonical products for one store.

    Usage:
        exporter = CatalogExporter("https://shop.example.com", paid=False)
        result = exporter.export_all(view, full_set, "shopify")
        if result.ok:
            result.artifact.write("output")
    """

    def __init__(
        self,
        store_url: str,
        paid: bool = False,
        free_tier_limit: int = DEFAULT_FREE_TIER_LIMIT,
    ):
        """
        Initialize the exporter.

        Args:
            store_url: Scraped store URL (used for file names)
            paid: Whether the account is on a paid plan
            free_tier_limit: Product cap for free accounts
        """
        self.store_url = store_url
        self.paid = paid
        self.gate = ExportPolicyGate(free_tier_limit)
        self.shopify = ShopifyCSVExporter()
        self.woocommerce = WooCommerceCSVExporter()

    def filename(self, fmt: ExportFormat) -> str:
        return export_basename(self.store_url) + FILENAME_SUFFIXES[fmt]

    # ── Public operations ─────────────────────────────────────────────────────

    def export_all(
        self,
        view: Sequence[CanonicalProduct],
        full_set: Sequence[CanonicalProduct],
        fmt: Union[ExportFormat, str] = ExportFormat.SHOPIFY,
    ) -> ExportResult:
        """
        Export the filtered view, or the full set when the view is empty.

        Args:
            view: Filtered products in display order
            full_set: All products of the session
            fmt: Output format

        Returns:
            ExportResult
        """
        candidates = list(view) if view else list(full_set)
        return self.export(candidates, fmt)

    def export_selected(
        self,
        view: Sequence[CanonicalProduct],
        full_set: Sequence[CanonicalProduct],
        selection: Selection,
        fmt: Union[ExportFormat, str] = ExportFormat.SHOPIFY,
    ) -> ExportResult:
        """
        Export the checked products.

        Selected ids are resolved against the filtered view, or against the
        full set when the view is empty. Checked products hidden by the
        current filters are not exported.

        Args:
            view: Filtered products in display order
            full_set: All products of the session
            selection: Checked product ids
            fmt: Output format

        Returns:
            ExportResult; status EMPTY with "No products selected" when
            nothing is checked
        """
        if not len(selection):
            logger.warning("Export of selected products requested with nothing selected")
            return ExportResult(ExportStatus.EMPTY, "No products selected")

        picked = selection.pick(view if view else full_set)
        return self.export(picked, fmt, selected=True)

    def export(
        self,
        products: Sequence[CanonicalProduct],
        fmt: Union[ExportFormat, str] = ExportFormat.SHOPIFY,
        selected: bool = False,
    ) -> ExportResult:
        """
        Gate and serialize products.

        Args:
            products: Candidate products in current order
            fmt: Output format
            selected: Whether the products come from a checkbox selection
                (changes the message wording)

        Returns:
            ExportResult with the artifact, or status EMPTY / INVALID
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            logger.error("Unsupported export format: %r", fmt)
            return ExportResult(ExportStatus.INVALID, f"Unsupported export format: {fmt}")

        try:
            gated = self._gate(products, selected)
        except ExportEmptySetError as e:
            logger.warning("Export skipped: %s", e)
            return ExportResult(ExportStatus.EMPTY, str(e))

        artifact, rows = self._serialize(gated.products, fmt)
        logger.info("Exported %d of %d products as %s", len(gated.products), gated.total, fmt.value)
        return ExportResult(
            status=ExportStatus.OK,
            message=self._message(gated, selected),
            artifact=artifact,
            exported=len(gated.products),
            total=gated.total,
            rows=rows,
        )

    # ── Internals ─────────────────────────────────────────────────────────────

    def _gate(self, products: Sequence[CanonicalProduct], selected: bool) -> GateResult:
        if not products:
            raise ExportEmptySetError("No products selected" if selected else "No products to export")
        return self.gate.apply(products, self.paid)

    def _serialize(self, products: List[CanonicalProduct], fmt: ExportFormat):
        if fmt == ExportFormat.JSON:
            content = json.dumps(
                [self._source_payload(p) for p in products],
                indent=2,
                ensure_ascii=False,
            )
            return ExportArtifact(self.filename(fmt), content.encode('utf-8'), JSON_MIME_TYPE), 0

        if fmt == ExportFormat.WOOCOMMERCE:
            exporter, mime_type = self.woocommerce, WOOCOMMERCE_MIME_TYPE
        else:
            exporter, mime_type = self.shopify, SHOPIFY_MIME_TYPE

        rows = exporter.rows(products)
        text = render_csv(exporter.fieldnames, rows)
        return ExportArtifact(self.filename(fmt), text.encode('utf-8'), mime_type), len(rows)

    @staticmethod
    def _source_payload(product: CanonicalProduct) -> Dict:
        if product.source is not None:
            return product.source
        payload = dataclasses.asdict(product)
        payload.pop('source', None)
        return payload

    @staticmethod
    def _message(gated: GateResult, selected: bool) -> str:
        noun = "selected products" if selected else "products"
        if gated.truncated:
            return (f"Free plan: Exported first {gated.limit} of {gated.total} {noun}. "
                    f"Upgrade for unlimited exports!")
        if selected:
            return f"Exported {len(gated.products)} selected products!"
        return f"Exported {len(gated.products)} products successfully!"
