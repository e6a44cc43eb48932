"""Pydantic schemas for API request/response validation"""

import datetime as dt
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from propcalc.domain.models import (
    AssetCategory,
    BenchmarkStatus,
    ComplianceStatus,
    Confidence,
    DeadlineStatus,
    DepreciationMethod,
    EntityRole,
    FamilyStatus,
    PoolType,
    RentReviewStatus,
    RiskLevel,
)


class DomainSchema(BaseModel):
    """Response schema populated from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# ---- CGT ----


class CapitalTransactionSchema(DomainSchema):
    category: str
    amount: float
    description: str = ""
    date: Optional[dt.date] = None


class CostBaseRequest(BaseModel):
    """Request body for POST /v1/cgt/cost-base"""

    purchase_price: float = Field(..., ge=0, description="Contract purchase price")
    transactions: List[CapitalTransactionSchema] = Field(default_factory=list)


class CostBaseResponse(BaseModel):
    purchase_price: float
    acquisition_costs: List[CapitalTransactionSchema]
    total_acquisition_costs: float
    total_cost_base: float


class SellingCostsSchema(DomainSchema):
    agent_commission: float = 0.0
    legal_fees: float = 0.0
    marketing_costs: float = 0.0
    other_selling_costs: float = 0.0


class CapitalGainRequest(BaseModel):
    """Request body for POST /v1/cgt/capital-gain"""

    cost_base: float
    sale_price: float
    selling_costs: SellingCostsSchema = Field(default_factory=SellingCostsSchema)
    purchase_date: date
    settlement_date: date


class CapitalGainResponse(DomainSchema):
    total_selling_costs: float
    net_proceeds: float
    capital_gain: float
    discounted_gain: float
    held_over_twelve_months: bool
    months_held: int


# ---- Depreciation ----


class DeductionRequest(BaseModel):
    """Request body for POST /v1/depreciation/deduction"""

    original_cost: float
    effective_life: float
    method: DepreciationMethod
    pro_rata_factor: float = Field(1.0, ge=0, le=1)


class DeductionResponse(BaseModel):
    method: DepreciationMethod
    yearly_deduction: float


class ScheduleRequest(BaseModel):
    original_cost: float
    effective_life: float
    method: DepreciationMethod
    max_years: Optional[int] = Field(None, gt=0)


class DepreciationYearSchema(DomainSchema):
    year: int
    opening_value: float
    deduction: float
    closing_value: float


class ScheduleResponse(BaseModel):
    years: List[DepreciationYearSchema]
    total_deductions: float


class ExtractedAssetSchema(DomainSchema):
    asset_name: str
    category: AssetCategory
    original_cost: float
    effective_life: float
    method: DepreciationMethod
    yearly_deduction: float


class ValidatedAssetSchema(ExtractedAssetSchema):
    discrepancy: bool


class ValidateRequest(BaseModel):
    assets: List[ExtractedAssetSchema]


class ValidateResponse(BaseModel):
    assets: List[ValidatedAssetSchema]
    discrepancy_count: int


class ProjectionAssetSchema(DomainSchema):
    id: str
    cost: float
    effective_life: float = Field(..., gt=0)
    method: DepreciationMethod
    purchase_date: date
    pool_type: PoolType = PoolType.INDIVIDUAL


class ProjectionCapitalWorkSchema(DomainSchema):
    id: str
    construction_cost: float
    construction_date: date
    claim_start_date: date


class ProjectionRequest(BaseModel):
    assets: List[ProjectionAssetSchema] = Field(default_factory=list)
    capital_works: List[ProjectionCapitalWorkSchema] = Field(default_factory=list)
    from_fy: int = Field(..., ge=1900, le=2100)
    to_fy: int = Field(..., ge=1900, le=2100)


class ProjectionRowSchema(DomainSchema):
    financial_year: int
    div40_total: float
    div43_total: float
    low_value_pool_total: float
    grand_total: float


class ProjectionResponse(BaseModel):
    rows: List[ProjectionRowSchema]


# ---- Yield ----


class YieldRequest(BaseModel):
    """Request body for POST /v1/yield"""

    annual_rent: float
    annual_expenses: float = 0.0
    property_value: float


class YieldResponse(BaseModel):
    gross_yield: float
    net_yield: float


class PortfolioYieldRequest(BaseModel):
    properties: List[YieldRequest]


class PortfolioYieldResponse(BaseModel):
    properties: List[YieldResponse]
    average_gross_yield: float
    average_net_yield: float


# ---- Benchmarks ----


class PropertyBenchmarkRequest(BaseModel):
    """Last 12 months of spend for one property"""

    property_id: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2, max_length=3)
    property_value: float
    insurance_total: float = 0.0
    council_rates_total: float = 0.0
    management_fees_total: float = 0.0
    rental_income_total: float = 0.0


class CategoryBenchmarkSchema(DomainSchema):
    user_amount: float
    average_amount: float
    status: BenchmarkStatus
    potential_savings: float


class PropertyBenchmarkResponse(DomainSchema):
    property_id: str
    insurance: Optional[CategoryBenchmarkSchema]
    council_rates: Optional[CategoryBenchmarkSchema]
    management_fees: Optional[CategoryBenchmarkSchema]
    total_potential_savings: float


class PortfolioBenchmarkRequest(BaseModel):
    properties: List[PropertyBenchmarkRequest]


class PortfolioBenchmarkResponse(DomainSchema):
    total_potential_savings: float
    insurance_savings: float
    council_rates_savings: float
    management_fees_savings: float
    properties_with_savings: int
    total_properties: int


class PerformanceRequest(BaseModel):
    """Property metrics alongside the suburb cohort medians"""

    user_yield: Optional[float] = None
    median_yield: Optional[float] = None
    user_growth: Optional[float] = None
    median_growth: Optional[float] = None
    user_expense_ratio: Optional[float] = None
    median_expense_ratio: Optional[float] = None
    user_vacancy_weeks: Optional[float] = None
    suburb_vacancy_rate: Optional[float] = None
    bedrooms: Optional[int] = None
    property_type: str = "house"
    suburb: str
    state: str


class PerformanceInsightSchema(DomainSchema):
    type: str
    message: str
    severity: str


class PerformanceResponse(BaseModel):
    cohort: str
    yield_percentile: Optional[int]
    growth_percentile: Optional[int]
    expense_percentile: Optional[int]
    vacancy_percentile: Optional[int]
    score: int
    score_label: str
    is_underperforming: bool
    insights: List[PerformanceInsightSchema]


# ---- Forecast ----


class CategoryForecastRequest(BaseModel):
    """Monthly totals keyed by calendar month (1-12)"""

    current_months: Dict[int, float] = Field(default_factory=dict)
    prior_months: Dict[int, float] = Field(default_factory=dict)
    months_elapsed: int = Field(..., ge=0, le=12)


class CategoryForecastResponse(BaseModel):
    actual: float
    forecast: float
    confidence: Confidence


class PropertyRefSchema(DomainSchema):
    id: str
    address: str


class ForecastTransactionSchema(DomainSchema):
    date: dt.date
    amount: float
    category: str
    property_id: Optional[str] = None


class TaxProfileSchema(DomainSchema):
    gross_salary: float = Field(0.0, ge=0)
    payg_withheld: float = Field(0.0, ge=0)
    other_deductions: float = Field(0.0, ge=0)
    depreciation_deductions: float = Field(0.0, ge=0)
    has_hecs_debt: bool = False
    has_private_health: bool = False
    family_status: FamilyStatus = FamilyStatus.SINGLE
    dependent_children: int = Field(0, ge=0)
    partner_income: float = Field(0.0, ge=0)


class TaxForecastRequest(BaseModel):
    financial_year: int = Field(..., ge=2000, le=2100)
    properties: List[PropertyRefSchema]
    transactions: List[ForecastTransactionSchema] = Field(default_factory=list)
    as_of: Optional[date] = None
    tax_profile: Optional[TaxProfileSchema] = None


class ForecastPairSchema(DomainSchema):
    actual: float
    forecast: float


class CategoryForecastLineSchema(DomainSchema):
    category: str
    label: str
    ato_code: str
    actual: float
    forecast: float
    confidence: Confidence


class PropertyForecastSchema(DomainSchema):
    property_id: str
    address: str
    categories: List[CategoryForecastLineSchema]
    total_income: ForecastPairSchema
    total_deductions: ForecastPairSchema
    net_result: ForecastPairSchema


class TaxPositionSchema(DomainSchema):
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


class TaxPositionPairSchema(DomainSchema):
    actual: TaxPositionSchema
    forecast: TaxPositionSchema


class TaxForecastResponse(DomainSchema):
    financial_year: int
    months_elapsed: int
    properties: List[PropertyForecastSchema]
    total_income: ForecastPairSchema
    total_deductions: ForecastPairSchema
    net_rental_result: ForecastPairSchema
    confidence: Confidence
    tax_position: Optional[TaxPositionPairSchema] = None


class TaxPositionRequest(TaxProfileSchema):
    """Request body for POST /v1/tax/position"""

    financial_year: int = Field(..., ge=2000, le=2100)
    rental_net_result: float = Field(..., description="Negative for a rental loss")


class TaxYearsResponse(BaseModel):
    financial_years: List[int]


# ---- Compliance ----


class RentIncreaseRuleResponse(BaseModel):
    state: str
    notice_days: int
    max_frequency: str
    fixed_term_rule: str
    earliest_increase_date: Optional[date] = None


class RentReviewInput(BaseModel):
    property_id: str
    annual_rent: float = Field(..., ge=0, description="Rent received over the last 12 months")
    market_rent_weekly: Optional[float] = Field(None, gt=0)


class RentReviewRequest(BaseModel):
    properties: List[RentReviewInput] = Field(..., min_length=1)


class RentReviewSchema(DomainSchema):
    property_id: str
    current_rent_weekly: float
    market_rent_weekly: Optional[float]
    gap_percent: Optional[float]
    annual_uplift: Optional[float]
    status: RentReviewStatus


class RentReviewResponse(DomainSchema):
    reviews: List[RentReviewSchema]
    total_annual_uplift: float
    reviewed_count: int
    total_count: int


class ContributionRequest(BaseModel):
    concessional: float = Field(0.0, ge=0)
    non_concessional: float = Field(0.0, ge=0)


class ContributionResponse(BaseModel):
    concessional: ComplianceStatus
    non_concessional: ComplianceStatus
    overall: ComplianceStatus
    caps: Dict[str, float]
    remaining: Dict[str, float]


class PensionRequest(BaseModel):
    balance: float = Field(..., ge=0)
    date_of_birth: date
    financial_year: int = Field(..., ge=2000, le=2100)
    amount_drawn: float = Field(0.0, ge=0)
    as_of: Optional[date] = None


class PensionResponse(BaseModel):
    minimum_required: float
    amount_drawn: float
    months_elapsed: int
    status: ComplianceStatus


class TrustDeadlineResponse(BaseModel):
    financial_year: int
    label: str
    deadline: date
    days_until_deadline: int
    status: DeadlineStatus


# ---- Climate & entities ----


class ClimateRiskRequest(BaseModel):
    flood_risk: RiskLevel
    bushfire_risk: RiskLevel


class ClimateRiskResponse(DomainSchema):
    flood_risk: RiskLevel
    bushfire_risk: RiskLevel
    overall_risk: RiskLevel


class PermissionsResponse(DomainSchema):
    role: EntityRole
    can_write: bool
    can_manage_members: bool
    can_manage_banks: bool
    can_view_audit_log: bool
    can_upload_documents: bool


# ---- Milestones ----


class ThresholdOverrideSchema(DomainSchema):
    """Preference layer; null fields inherit"""

    lvr_thresholds: Optional[List[float]] = None
    equity_thresholds: Optional[List[float]] = None
    enabled: Optional[bool] = None


class ResolveThresholdsRequest(BaseModel):
    global_prefs: Optional[ThresholdOverrideSchema] = None
    property_override: Optional[ThresholdOverrideSchema] = None


class ThresholdConfigResponse(DomainSchema):
    lvr_thresholds: List[float]
    equity_thresholds: List[float]
    enabled: bool


class MilestonePropertyInput(BaseModel):
    property_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    address: str = ""
    estimated_value: float
    loan_balance: float = 0.0
    global_prefs: Optional[ThresholdOverrideSchema] = None
    property_override: Optional[ThresholdOverrideSchema] = None


class MilestoneJobRequest(BaseModel):
    properties: List[MilestonePropertyInput]


class RecordedMilestone(BaseModel):
    property_id: str
    milestone_type: str
    value: float
    title: str
    body: str


class MilestoneJobResponse(BaseModel):
    processed: int
    skipped: int
    new_milestones: List[RecordedMilestone]


# ---- Alerts ----


class ExpectedTransactionInput(BaseModel):
    """Overdue occurrence of a recurring rent transaction"""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    property_id: Optional[str] = None
    expected_date: date
    expected_amount: float
    description: str
    property_address: Optional[str] = None
    alert_delay_days: Optional[int] = Field(None, ge=0)


class MissedRentJobRequest(BaseModel):
    expected_transactions: List[ExpectedTransactionInput]
    as_of: Optional[date] = None


class MissedRentJobResponse(BaseModel):
    processed: int
    created: int
    skipped: int
    alert_ids: List[str]


class TransactionSampleSchema(DomainSchema):
    amount: float
    description: str
    id: Optional[str] = None
    date: Optional[dt.date] = None


class HistoricalAverageSchema(DomainSchema):
    avg: float
    count: int


class AnomalyCheckRequest(BaseModel):
    transaction: TransactionSampleSchema
    historical: Optional[HistoricalAverageSchema] = None
    recent_transactions: List[TransactionSampleSchema] = Field(default_factory=list)
    known_merchants: Optional[List[str]] = None


class AnomalyResultSchema(DomainSchema):
    alert_type: str
    severity: str
    description: str
    suggested_action: str
    metadata: Dict = Field(default_factory=dict)


class AnomalyCheckResponse(BaseModel):
    anomalies: List[AnomalyResultSchema]


class AlertSchema(BaseModel):
    alert_id: str
    alert_type: str
    severity: str
    status: str
    description: str
    suggested_action: Optional[str]
    expected_transaction_id: Optional[str]
    created_at: str


class AlertListResponse(BaseModel):
    user_id: str
    alerts: List[AlertSchema]
