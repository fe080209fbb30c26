# Test type: unit
# Validation: income tax regimes, TDS, GST, HRA, salary, gratuity
# Command: pytest test/test_tax.py -v

import pytest

from app.errors import InvalidInput
from app.utils.tax import (
    calculate_gratuity,
    calculate_gst,
    calculate_hra,
    calculate_income_tax,
    calculate_salary,
    calculate_tds,
)


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------

class TestIncomeTax:
    def test_new_regime_ten_lakh(self):
        result = calculate_income_tax(1_000_000, regime="new").result
        assert result["taxableIncome"] == 1_000_000
        assert result["taxAmount"] == 60_000
        assert result["effectiveTaxRate"] == pytest.approx(6.0)
        assert result["takeHome"] == 940_000

    def test_new_regime_ignores_deductions(self):
        with_deductions = calculate_income_tax(1_000_000, 150_000, "new").result
        assert with_deductions["taxableIncome"] == 1_000_000
        assert with_deductions["taxAmount"] == 60_000

    def test_old_regime_applies_deductions(self):
        """Taxable 850000: 0 + 12500 + 350000 * 20% = 82500."""
        result = calculate_income_tax(1_000_000, 150_000, "old").result
        assert result["taxableIncome"] == 850_000
        assert result["taxAmount"] == 82_500

    def test_breakup_rows(self):
        rows = calculate_income_tax(700_000, regime="old").result["slabwiseBreakup"]
        assert rows == [
            {"slab": "₹0-₹250,000", "taxableAmount": 250_000, "tax": 0},
            {"slab": "₹250,000-₹500,000", "taxableAmount": 250_000, "tax": 12_500},
            {"slab": "₹500,000-₹1,000,000", "taxableAmount": 200_000, "tax": 40_000},
        ]

    def test_top_slab_label(self):
        rows = calculate_income_tax(2_000_000).result["slabwiseBreakup"]
        assert rows[-1]["slab"] == "₹1,500,000 and above"
        assert rows[-1]["taxableAmount"] == 500_000

    def test_breakup_sums_to_total(self):
        result = calculate_income_tax(1_800_000).result
        assert sum(row["tax"] for row in result["slabwiseBreakup"]) == result["taxAmount"]

    def test_zero_income(self):
        result = calculate_income_tax(0).result
        assert result["taxAmount"] == 0
        assert result["effectiveTaxRate"] == 0
        assert result["slabwiseBreakup"] == []

    def test_deductions_above_income_floor_at_zero(self):
        result = calculate_income_tax(200_000, 500_000, "old").result
        assert result["taxableIncome"] == 0
        assert result["taxAmount"] == 0

    def test_unknown_regime_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_income_tax(1_000_000, regime="flat")


# ---------------------------------------------------------------------------
# TDS
# ---------------------------------------------------------------------------

class TestTDS:
    def test_salary_above_threshold(self):
        result = calculate_tds(60_000, "salary").result
        assert result["isTDSApplicable"] is True
        assert result["tdsAmount"] == 6000
        assert result["netAmount"] == 54_000

    def test_below_threshold(self):
        result = calculate_tds(10_000, "rent").result
        assert result["isTDSApplicable"] is False
        assert result["tdsAmount"] == 0
        assert result["netAmount"] == 10_000

    def test_non_resident_rate(self):
        result = calculate_tds(30_000, "rent", is_non_resident=True).result
        assert result["tdsRate"] == 30.0
        assert result["tdsAmount"] == 9000

    def test_threshold_is_inclusive(self):
        assert calculate_tds(15_000, "commission").result["tdsAmount"] == 750

    def test_unknown_payment_type(self):
        with pytest.raises(InvalidInput):
            calculate_tds(10_000, "dividend")


# ---------------------------------------------------------------------------
# GST
# ---------------------------------------------------------------------------

class TestGST:
    def test_exclusive(self):
        """1000 at 18%: CGST 90 + SGST 90."""
        result = calculate_gst(1000, 18).result
        assert result["baseAmount"] == 1000
        assert result["cgst"] == 90
        assert result["sgst"] == 90
        assert result["totalGST"] == 180
        assert result["totalAmount"] == 1180
        assert result["breakdown"] == {"cgstRate": 9.0, "sgstRate": 9.0}

    def test_inclusive(self):
        """1180 including 18% -> base 1000."""
        result = calculate_gst(1180, 18, is_inclusive=True).result
        assert result["baseAmount"] == 1000
        assert result["totalGST"] == 180
        assert result["totalAmount"] == 1180

    def test_zero_rate_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_gst(1000, 0)


# ---------------------------------------------------------------------------
# HRA
# ---------------------------------------------------------------------------

class TestHRA:
    def test_rent_rule_is_least(self):
        """
        basic 50000, HRA 20000 (40% default), metro cap 25000,
        rent 20000 - 10% of basic = 15000 -> exemption 15000.
        """
        calc = calculate_hra(50_000, 20_000, "metro")
        assert calc.result["hraReceived"] == 20_000
        assert calc.result["hraExemption"] == 15_000
        assert calc.result["taxableHRA"] == 5000
        assert calc.result["annualExemption"] == 180_000

    def test_non_metro_cap(self):
        """40% of 50000 = 20000 caps an HRA of 30000 with high rent."""
        result = calculate_hra(50_000, 60_000, "non-metro", hra_received=30_000).result
        assert result["hraExemption"] == 20_000

    def test_low_rent_gives_no_exemption(self):
        result = calculate_hra(50_000, 4000, "metro").result
        assert result["hraExemption"] == 0

    def test_zero_rent_allowed(self):
        result = calculate_hra(50_000, 0, "metro").result
        assert result["hraExemption"] == 0
        assert result["taxableHRA"] == 20_000

    def test_monthly_series(self):
        series = calculate_hra(50_000, 20_000, "metro").series
        assert len(series) == 12
        assert series[0]["label"] == "Month 1"
        assert series[-1]["label"] == "Month 12"

    def test_unknown_city_type(self):
        with pytest.raises(InvalidInput):
            calculate_hra(50_000, 20_000, "rural")


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------

class TestSalary:
    def test_take_home(self):
        """
        gross 50000; PF min(3600, 1800) = 1800; PT 200;
        annual 600000 > 5L -> tax 5000; net 43000.
        """
        result = calculate_salary(30_000, hra=12_000, special_allowance=8000).result
        assert result["grossSalary"] == 50_000
        assert result["deductions"] == {
            "providentFund": 1800,
            "professionalTax": 200,
            "incomeTax": 5000,
            "extraDeductions": 0,
        }
        assert result["totalDeductions"] == 7000
        assert result["netSalary"] == 43_000

    def test_low_salary_has_no_tax_or_pt(self):
        """PF is 12% of 10000 = 1200, below the cap."""
        result = calculate_salary(10_000).result
        assert result["deductions"]["providentFund"] == 1200
        assert result["deductions"]["professionalTax"] == 0
        assert result["deductions"]["incomeTax"] == 0
        assert result["netSalary"] == 8800

    def test_extra_deductions(self):
        result = calculate_salary(10_000, extra_deductions=500).result
        assert result["netSalary"] == 8300

    def test_negative_allowance_rejected(self):
        with pytest.raises(InvalidInput) as exc:
            calculate_salary(30_000, medical_allowance=-1)
        assert exc.value.field == "medical_allowance"


# ---------------------------------------------------------------------------
# Gratuity
# ---------------------------------------------------------------------------

class TestGratuity:
    def test_reference_scenario(self):
        """50000 / 26 = 1923.08 per day; * 15 = 28846.15; * 10 = 288461.5."""
        result = calculate_gratuity(50_000, 10).result
        assert result["gratuityAmount"] == 288_462
        assert result["isEligible"] is True
        assert result["calculationBreakdown"]["dailyWage"] == 1923
        assert result["calculationBreakdown"]["fifteenDaysSalary"] == 28_846

    def test_under_five_years(self):
        result = calculate_gratuity(50_000, 4).result
        assert result["isEligible"] is False
        assert result["gratuityAmount"] == 0

    def test_statutory_cap(self):
        assert calculate_gratuity(500_000, 30).result["gratuityAmount"] == 2_000_000

    def test_custom_cap(self):
        assert calculate_gratuity(500_000, 30, cap=2_500_000).result["gratuityAmount"] == 2_500_000
