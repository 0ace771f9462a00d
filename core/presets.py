
DISCLAIMER = ("Scenario worksheet for internal use only. Figures are directional and subject to formal underwriting. "
"Buydown pricing uses a fixed 0.50 points per 0.125% heuristic rather than a live pricing grid, and the APR shown is "
"an illustrative estimate, not a Regulation Z APR. Seller credit caps reflect typical program limits; investor "
"overlays and underwriter discretion prevail.")

PROGRAMS = ["Conventional", "FHA", "VA", "USDA", "Jumbo"]
PMI_TYPES = ["None", "BPMI", "SPMI", "LPMI"]

# Maximum seller/builder contribution as a percent of price.  Conventional
# caps step down as LTV rises; the other programs are flat.
CONVENTIONAL_CAP_BANDS = {">90": 3.0, "75-90": 6.0, "<=75": 9.0}
PROGRAM_CAP_PCT = {"FHA": 6.0, "VA": 4.0, "USDA": 6.0, "Jumbo": 3.0}

# Each buydown step buys 0.125% off the note rate for 0.50 points.
BUYDOWN_STEP_RATE = 0.125
BUYDOWN_STEP_POINTS_PCT = 0.50
MAX_BREAK_EVEN_MONTHS = 84

FHA_HIGH_BALANCE_THRESHOLD = 726200
# Annual MIP factor keyed by term (>15 / <=15 years), balance and LTV band.
FHA_ANNUAL_MIP = {
    ">15_high_<=90": 0.0055, ">15_high_>90": 0.0060,
    ">15_std_<=90": 0.0050, ">15_std_>90": 0.0055,
    "<=15_high_<=90": 0.0040, "<=15_high_>90": 0.0065,
    "<=15_std_<=90": 0.0015, "<=15_std_>90": 0.0040,
}

BLANK_SCENARIO = {
    "name": "Option",
    "price": 450000.0,
    "ltv": 0.95,
    "loan_amount": None,
    "program": "Conventional",
    "term_months": 360,
    "note_rate": 6.875,
    "discount_points_pct": 0.0,
    "closing_costs": 9000.0,
    "seller_credit": 12000.0,
    "pmi_type": "BPMI",
    "pmi_annual_factor": 0.006,
    "taxes_monthly": 350.0,
    "insurance_monthly": 110.0,
    "hoa_monthly": 0.0,
    "lock_rate": False,
}
