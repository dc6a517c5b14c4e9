"""
ledger/domains.py

Aggregate domains sharing the reconciliation engine, declared as data:
how each domain's lines move stock and which totals rules its payloads
must satisfy.
"""

from __future__ import annotations

from db.models.consumption import SuppliesConsumption, SuppliesConsumptionDetail
from db.models.harvest import Harvest, HarvestDetail
from db.models.purchase import SuppliesPurchase, SuppliesPurchaseDetail
from db.models.sale import Sale, SaleDetail
from ledger.reconciler import AggregatePolicy
from ledger.stock import StockDirection
from ledger.totals import (
    ConvertedSumRule,
    MultipleOfRule,
    SumMatchRule,
    TotalsRuleSet,
    UniqueRefRule,
)

# ---------------------------------------------------------------------------
# Harvest: every line feeds the harvested crop's stock. amount is summed in
# the canonical unit of the lines' family, which must be the crop's.
# ---------------------------------------------------------------------------

HARVEST_POLICY = AggregatePolicy(
    name="harvest",
    aggregate_model=Harvest,
    detail_model=HarvestDetail,
    effect=StockDirection.INCREMENT,
    aggregate_fields=("date", "crop_id", "amount", "value_pay", "observation"),
    detail_fields=("employee_id", "amount", "unit_of_measure", "value_pay"),
    aggregate_resource_field="crop_id",
    canonical_total_field="amount",
)

HARVEST_RULES = TotalsRuleSet(
    rules=(
        SumMatchRule(total_field="value_pay", detail_field="value_pay"),
        ConvertedSumRule(total_field="amount"),
        UniqueRefRule(detail_field="employee_id", label="employee"),
    ),
)

# ---------------------------------------------------------------------------
# Sale: every line draws on the stock of the crop it sells. One sale stays
# within one unit family, so its amount has a single canonical unit.
# ---------------------------------------------------------------------------

SALE_POLICY = AggregatePolicy(
    name="sale",
    aggregate_model=Sale,
    detail_model=SaleDetail,
    effect=StockDirection.DECREMENT,
    aggregate_fields=("date", "amount", "value_pay"),
    detail_fields=("crop_id", "client_id", "amount", "unit_of_measure", "value_pay"),
    line_resource_field="crop_id",
    canonical_total_field="amount",
)

SALE_RULES = TotalsRuleSet(
    rules=(
        SumMatchRule(total_field="value_pay", detail_field="value_pay"),
        ConvertedSumRule(total_field="amount"),
    ),
)

# ---------------------------------------------------------------------------
# Supplies purchase: every line adds to a supply's inventory.
# ---------------------------------------------------------------------------

PURCHASE_POLICY = AggregatePolicy(
    name="supplies purchase",
    aggregate_model=SuppliesPurchase,
    detail_model=SuppliesPurchaseDetail,
    effect=StockDirection.INCREMENT,
    aggregate_fields=("date", "value_pay"),
    detail_fields=("supply_id", "supplier_id", "amount", "unit_of_measure", "value_pay"),
    line_resource_field="supply_id",
)


def purchase_rules(value_multiple: int = 50) -> TotalsRuleSet:
    return TotalsRuleSet(
        rules=(
            SumMatchRule(total_field="value_pay", detail_field="value_pay"),
            MultipleOfRule(total_field="value_pay", multiple=value_multiple),
        ),
    )


# ---------------------------------------------------------------------------
# Supplies consumption: every line draws on a supply's inventory.
# ---------------------------------------------------------------------------

CONSUMPTION_POLICY = AggregatePolicy(
    name="supplies consumption",
    aggregate_model=SuppliesConsumption,
    detail_model=SuppliesConsumptionDetail,
    effect=StockDirection.DECREMENT,
    aggregate_fields=("date", "observation"),
    detail_fields=("supply_id", "crop_id", "amount", "unit_of_measure"),
    line_resource_field="supply_id",
)

CONSUMPTION_RULES = TotalsRuleSet()
