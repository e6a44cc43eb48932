"""Transaction categories on the ATO rental property schedule"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Category:
    value: str
    label: str
    type: str  # "income" | "expense"
    is_deductible: bool
    ato_reference: str = ""


CATEGORIES: List[Category] = [
    Category("rental_income", "Rental Income", "income", False, "Item 21"),
    Category("other_rental_income", "Other Rental Income", "income", False, "Item 21"),
    Category("advertising", "Advertising for Tenants", "expense", True, "D1"),
    Category("body_corporate", "Body Corporate Fees", "expense", True, "D2"),
    Category("borrowing_expenses", "Borrowing Expenses", "expense", True, "D3"),
    Category("cleaning", "Cleaning", "expense", True, "D4"),
    Category("council_rates", "Council Rates", "expense", True, "D5"),
    Category("gardening", "Gardening & Lawn Mowing", "expense", True, "D7"),
    Category("insurance", "Insurance", "expense", True, "D8"),
    Category("interest_on_loans", "Interest on Loans", "expense", True, "D9"),
    Category("land_tax", "Land Tax", "expense", True, "D10"),
    Category("legal_expenses", "Legal Expenses", "expense", True, "D11"),
    Category("pest_control", "Pest Control", "expense", True, "D12"),
    Category("property_agent_fees", "Property Agent Fees", "expense", True, "D13"),
    Category("repairs_and_maintenance", "Repairs & Maintenance", "expense", True, "D14"),
    Category("stationery_and_postage", "Stationery, Phone & Postage", "expense", True, "D16"),
    Category("travel_expenses", "Travel Expenses", "expense", True, "D17"),
    Category("water_charges", "Water Charges", "expense", True, "D18"),
    Category("sundry_rental_expenses", "Sundry Rental Expenses", "expense", True, "D19"),
    # Capital items: part of the CGT cost base, not deductible
    Category("stamp_duty", "Stamp Duty", "expense", False),
    Category("conveyancing", "Conveyancing", "expense", False),
    Category("buyers_agent_fees", "Buyer's Agent Fees", "expense", False),
    Category("initial_repairs", "Initial Repairs", "expense", False),
    Category("uncategorized", "Uncategorized", "expense", False),
]

CATEGORY_MAP: Dict[str, Category] = {c.value: c for c in CATEGORIES}

INCOME_CATEGORIES: List[Category] = [c for c in CATEGORIES if c.type == "income"]
DEDUCTIBLE_CATEGORIES: List[Category] = [c for c in CATEGORIES if c.is_deductible]
