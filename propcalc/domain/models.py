"""Domain models - pure Python dataclasses representing calculation inputs and results"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

# Calendar month (1=Jan, 12=Dec) -> total amount
MonthlyTotals = Dict[int, float]


class DepreciationMethod(str, Enum):
    """ATO Div 40 depreciation methods"""

    PRIME_COST = "prime_cost"
    DIMINISHING_VALUE = "diminishing_value"


class AssetCategory(str, Enum):
    PLANT_EQUIPMENT = "plant_equipment"
    CAPITAL_WORKS = "capital_works"


class PoolType(str, Enum):
    INDIVIDUAL = "individual"
    LOW_VALUE = "low_value"
    IMMEDIATE_WRITEOFF = "immediate_writeoff"


class BenchmarkStatus(str, Enum):
    BELOW = "below"
    AVERAGE = "average"
    ABOVE = "above"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(str, Enum):
    """Climate hazard rating, ordered low < medium < high < extreme"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class EntityRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    ACCOUNTANT = "accountant"


class ComplianceStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    BREACH = "breach"


class DeadlineStatus(str, Enum):
    COMPLIANT = "compliant"
    APPROACHING = "approaching"
    URGENT = "urgent"
    OVERDUE = "overdue"


class FamilyStatus(str, Enum):
    SINGLE = "single"
    COUPLE = "couple"
    FAMILY = "family"


class RentReviewStatus(str, Enum):
    """How far current rent sits from the market estimate"""

    BELOW_MARKET_CRITICAL = "below_market_critical"
    BELOW_MARKET_WARNING = "below_market_warning"
    AT_MARKET = "at_market"
    ABOVE_MARKET = "above_market"
    NO_REVIEW = "no_review"


# ---- CGT ----


@dataclass
class CapitalTransaction:
    """Transaction that may form part of a property's cost base"""

    category: str
    amount: float
    description: str = ""
    date: Optional[date] = None


@dataclass
class SellingCosts:
    agent_commission: float = 0.0
    legal_fees: float = 0.0
    marketing_costs: float = 0.0
    other_selling_costs: float = 0.0

    @property
    def total(self) -> float:
        return self.agent_commission + self.legal_fees + self.marketing_costs + self.other_selling_costs


@dataclass
class CapitalGainInput:
    """Sale details for a CGT event"""

    cost_base: float
    sale_price: float
    selling_costs: SellingCosts
    purchase_date: date
    settlement_date: date


@dataclass
class CapitalGainResult:
    total_selling_costs: float
    net_proceeds: float
    capital_gain: float
    discounted_gain: float
    held_over_twelve_months: bool


# ---- Depreciation ----


@dataclass
class DepreciationYear:
    """One row of a multi-year depreciation schedule"""

    year: int
    opening_value: float
    deduction: float
    closing_value: float


@dataclass
class ExtractedAsset:
    """Asset line read from a quantity surveyor's depreciation schedule"""

    asset_name: str
    category: AssetCategory
    original_cost: float
    effective_life: float
    method: DepreciationMethod
    yearly_deduction: float


@dataclass
class ValidatedAsset:
    asset_name: str
    category: AssetCategory
    original_cost: float
    effective_life: float
    method: DepreciationMethod
    yearly_deduction: float
    discrepancy: bool


@dataclass
class ProjectionAsset:
    id: str
    cost: float
    effective_life: float
    method: DepreciationMethod
    purchase_date: date
    pool_type: PoolType = PoolType.INDIVIDUAL


@dataclass
class ProjectionCapitalWork:
    id: str
    construction_cost: float
    construction_date: date
    claim_start_date: date


@dataclass
class ProjectionRow:
    financial_year: int
    div40_total: float
    div43_total: float
    low_value_pool_total: float
    grand_total: float


# ---- Benchmarking ----


@dataclass
class CategoryBenchmark:
    user_amount: float
    average_amount: float
    status: BenchmarkStatus
    potential_savings: float


@dataclass
class PropertyBenchmark:
    property_id: str
    insurance: Optional[CategoryBenchmark]
    council_rates: Optional[CategoryBenchmark]
    management_fees: Optional[CategoryBenchmark]
    total_potential_savings: float


@dataclass
class PortfolioBenchmarkSummary:
    total_potential_savings: float
    insurance_savings: float
    council_rates_savings: float
    management_fees_savings: float
    properties_with_savings: int
    total_properties: int


@dataclass
class PerformanceInsight:
    type: str  # "yield" | "expense" | "vacancy"
    message: str
    severity: str  # "positive" | "warning" | "critical"


# ---- Forecasting ----


@dataclass
class CategoryForecast:
    actual: float
    forecast: float


@dataclass
class CategoryForecastLine:
    category: str
    label: str
    ato_code: str
    actual: float
    forecast: float
    confidence: Confidence


@dataclass
class ForecastPair:
    actual: float = 0.0
    forecast: float = 0.0


@dataclass
class ForecastTransaction:
    """Categorised transaction used to build monthly totals"""

    date: date
    amount: float
    category: str
    property_id: Optional[str]


@dataclass
class PropertyRef:
    id: str
    address: str


@dataclass
class PropertyForecast:
    property_id: str
    address: str
    categories: List[CategoryForecastLine]
    total_income: ForecastPair
    total_deductions: ForecastPair
    net_result: ForecastPair


@dataclass
class TaxProfile:
    """Personal tax situation the rental result is layered onto"""

    gross_salary: float = 0.0
    payg_withheld: float = 0.0
    other_deductions: float = 0.0
    depreciation_deductions: float = 0.0
    has_hecs_debt: bool = False
    has_private_health: bool = False
    family_status: FamilyStatus = FamilyStatus.SINGLE
    dependent_children: int = 0
    partner_income: float = 0.0


@dataclass
class MedicareSurcharge:
    surcharge: float
    applies: bool
    threshold: float
    combined_income: float


@dataclass
class TaxPosition:
    """Estimated tax outcome for one financial year; refund_or_owing > 0 is a refund"""

    financial_year: int
    gross_salary: float
    rental_net_result: float
    taxable_income: float
    other_deductions: float
    depreciation_deductions: float
    total_deductions: float
    base_tax: float
    medicare_levy: float
    medicare_levy_surcharge: float
    hecs_repayment: float
    total_tax_liability: float
    payg_withheld: float
    refund_or_owing: float
    is_refund: bool
    marginal_rate: float
    property_savings: float
    mls_applies: bool
    mls_threshold: float
    combined_income: float


@dataclass
class TaxPositionPair:
    actual: TaxPosition
    forecast: TaxPosition


@dataclass
class TaxForecastResult:
    financial_year: int
    months_elapsed: int
    properties: List[PropertyForecast]
    total_income: ForecastPair
    total_deductions: ForecastPair
    net_rental_result: ForecastPair
    confidence: Confidence
    tax_position: Optional[TaxPositionPair] = None


# ---- Compliance ----


@dataclass(frozen=True)
class RentIncreaseRule:
    notice_days: int
    max_frequency: str
    fixed_term_rule: str


@dataclass
class RentReview:
    property_id: str
    current_rent_weekly: float
    market_rent_weekly: Optional[float]
    gap_percent: Optional[float]
    annual_uplift: Optional[float]
    status: RentReviewStatus


@dataclass
class RentReviewSummary:
    """Portfolio rent review, largest gap first"""

    reviews: List[RentReview]
    total_annual_uplift: float
    reviewed_count: int
    total_count: int


@dataclass
class ContributionCapStatus:
    concessional: ComplianceStatus
    non_concessional: ComplianceStatus
    overall: ComplianceStatus


# ---- Alerts & milestones ----


@dataclass
class AnomalyResult:
    """Detected anomaly ready to be persisted as an alert"""

    alert_type: str
    severity: str  # "info" | "warning" | "critical"
    description: str
    suggested_action: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExpectedTransaction:
    """Occurrence of a recurring transaction that should have arrived"""

    id: str
    expected_date: date
    expected_amount: float
    description: str
    property_address: Optional[str] = None


@dataclass
class TransactionSample:
    """Minimal transaction view used by the anomaly detectors"""

    amount: float
    description: str
    id: Optional[str] = None
    date: Optional[date] = None


@dataclass
class HistoricalAverage:
    avg: float
    count: int


@dataclass
class ThresholdConfig:
    lvr_thresholds: List[float]
    equity_thresholds: List[float]
    enabled: bool


@dataclass
class ThresholdOverride:
    """Preference layer; None fields inherit from the layer below"""

    lvr_thresholds: Optional[List[float]] = None
    equity_thresholds: Optional[List[float]] = None
    enabled: Optional[bool] = None


@dataclass
class Milestone:
    milestone_type: str  # "lvr" | "equity_amount"
    value: float


@dataclass
class EquityPosition:
    equity: float
    lvr: float


# ---- Misc ----


@dataclass
class ClimateRisk:
    flood_risk: RiskLevel
    bushfire_risk: RiskLevel
    overall_risk: RiskLevel


@dataclass(frozen=True)
class EntityPermissions:
    can_write: bool
    can_manage_members: bool
    can_manage_banks: bool
    can_view_audit_log: bool
    can_upload_documents: bool
