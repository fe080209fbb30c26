# Test type: unit
# Validation: simple/compound interest, FD, RD, PPF, NSC, SCSS, POMIS, APY
# Command: pytest test/test_schemes.py -v

import pytest

from app.errors import InvalidInput
from app.utils.investments import calculate_sip
from app.utils.schemes import (
    calculate_apy,
    calculate_compound_interest,
    calculate_fd,
    calculate_nsc,
    calculate_pomis,
    calculate_ppf,
    calculate_rd,
    calculate_scss,
    calculate_simple_interest,
    nearest_pension_slab,
)


# ---------------------------------------------------------------------------
# Interest
# ---------------------------------------------------------------------------

class TestSimpleInterest:
    def test_reference_scenario(self):
        """10000 * 5% * 5 years = 2500."""
        calc = calculate_simple_interest(10_000, 5, 5)
        assert calc.result == {"interest": 2500, "amount": 12_500}

    def test_series_grows_linearly(self):
        values = [p["value"] for p in calculate_simple_interest(10_000, 5, 5).series]
        assert values == [10_000, 10_500, 11_000, 11_500, 12_000, 12_500]


class TestCompoundInterest:
    def test_annual(self):
        """10000 * 1.1^2 = 12100."""
        result = calculate_compound_interest(10_000, 10, 2).result
        assert result["amount"] == 12_100
        assert result["interest"] == 2100

    def test_quarterly(self):
        """10000 * 1.025^8 = 12184.03."""
        result = calculate_compound_interest(10_000, 10, 2, frequency=4).result
        assert result["amount"] == 12_184

    def test_more_frequent_compounding_earns_more(self):
        yearly = calculate_compound_interest(10_000, 8, 5, frequency=1).result
        monthly = calculate_compound_interest(10_000, 8, 5, frequency=12).result
        assert monthly["amount"] > yearly["amount"]

    def test_series_is_yearly(self):
        series = calculate_compound_interest(10_000, 10, 2, frequency=4).series
        assert [p["label"] for p in series] == ["Year 0", "Year 1", "Year 2"]
        assert series[-1]["value"] == 12_184

    def test_unsupported_frequency_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_compound_interest(10_000, 10, 2, frequency=3)


# ---------------------------------------------------------------------------
# Bank deposits
# ---------------------------------------------------------------------------

class TestFD:
    def test_quarterly_compounding(self):
        """100000 * 1.0175^20 = 141,477.8."""
        result = calculate_fd(100_000, 7, 5).result
        assert result["maturityValue"] == pytest.approx(141_478, abs=2)
        assert result["totalInvestment"] == 100_000
        assert result["totalInterest"] == result["maturityValue"] - 100_000

    def test_invalid_frequency(self):
        with pytest.raises(InvalidInput) as exc:
            calculate_fd(100_000, 7, 5, compounding_frequency=6)
        assert exc.value.field == "compounding_frequency"


class TestRD:
    def test_matches_explicit_instalment_sum(self):
        """Each instalment i earns (1 + r)^(n - i)."""
        monthly, rate, years = 5000, 7.5, 3
        r, n = rate / 1200, years * 12
        expected = sum(monthly * (1 + r) ** (n - i) for i in range(n))
        result = calculate_rd(monthly, rate, years).result
        assert result["maturityValue"] == pytest.approx(expected, abs=1)
        assert result["totalInvestment"] == 180_000

    def test_same_maturity_as_sip(self):
        rd = calculate_rd(5000, 12, 10).result
        sip = calculate_sip(5000, 10, 12).result
        assert rd["maturityValue"] == sip["maturityValue"]

    def test_series_is_yearly(self):
        assert len(calculate_rd(5000, 7.5, 3).series) == 4


# ---------------------------------------------------------------------------
# Small-savings schemes
# ---------------------------------------------------------------------------

class TestPPF:
    def test_full_deposit_fifteen_years(self):
        """Deposit at year end, interest on opening balance: sum of 150000 * 1.071^k."""
        expected = sum(150_000 * 1.071 ** k for k in range(15))
        result = calculate_ppf(150_000, 15, 7.1).result
        assert result["totalInvestment"] == 2_250_000
        assert result["maturityValue"] == pytest.approx(expected, abs=1)
        assert result["totalInterest"] == pytest.approx(expected - 2_250_000, abs=1)

    def test_defaults_to_fifteen_years(self):
        assert len(calculate_ppf(10_000).series) == 16

    def test_higher_rate_grows_more(self):
        base = calculate_ppf(100_000, 15, 7.1).result["maturityValue"]
        bumped = calculate_ppf(100_000, 15, 8.0).result["maturityValue"]
        assert bumped > base

    def test_lock_in_enforced(self):
        with pytest.raises(InvalidInput):
            calculate_ppf(100_000, 10)

    def test_deposit_limit_enforced(self):
        with pytest.raises(InvalidInput):
            calculate_ppf(200_000, 15)


class TestNSC:
    def test_five_years(self):
        """100000 * 1.068^5 = 138,949.3."""
        result = calculate_nsc(100_000).result
        assert result["maturityValue"] == 138_949
        assert result["totalInterest"] == 38_949


class TestSCSS:
    def test_quarterly_payout(self):
        """1000000 * 8.2% / 4 = 20500 per quarter."""
        result = calculate_scss(1_000_000).result
        assert result["quarterlyInterest"] == 20_500
        assert result["annualInterest"] == 82_000
        assert result["totalInterest"] == 410_000
        assert result["maturityValue"] == 1_410_000

    def test_extended_term(self):
        result = calculate_scss(1_000_000, years=8).result
        assert result["totalInterest"] == 656_000

    def test_deposit_cap(self):
        with pytest.raises(InvalidInput):
            calculate_scss(4_000_000)

    def test_invalid_term(self):
        with pytest.raises(InvalidInput):
            calculate_scss(1_000_000, years=6)


class TestPOMIS:
    def test_single_account_max(self):
        """900000 * 7.4% / 12 = 5550 per month."""
        result = calculate_pomis(900_000, "single").result
        assert result["monthlyIncome"] == 5550
        assert result["annualIncome"] == 66_600
        assert result["totalInterest"] == 333_000
        assert result["maturityValue"] == 1_233_000

    def test_single_limit_exceeded(self):
        with pytest.raises(InvalidInput):
            calculate_pomis(1_000_000, "single")

    def test_joint_allows_higher_deposit(self):
        assert calculate_pomis(1_000_000, "joint").result["monthlyIncome"] == pytest.approx(
            6167, abs=1
        )


# ---------------------------------------------------------------------------
# APY
# ---------------------------------------------------------------------------

class TestAPY:
    def test_youngest_entry_top_slab(self):
        """Chart: 42/month per 1000 of pension at 18 -> 210 for 5000."""
        calc = calculate_apy(18, 5000)
        assert calc.result["monthlyContribution"] == 210
        assert calc.result["totalInvestment"] == 210 * 12 * 42
        assert calc.result["corpusAtMaturity"] == 5000 * 12 * 170
        assert calc.result["monthlyPension"] == 5000
        assert len(calc.series) == 43
        assert calc.series[0] == {"label": "Age 18", "value": 0.0}

    @pytest.mark.parametrize(
        "desired, slab",
        [(1000, 1000), (2400, 2000), (2500, 2000), (2600, 3000), (5000, 5000)],
    )
    def test_nearest_slab(self, desired, slab):
        assert nearest_pension_slab(desired) == slab

    def test_entry_age_limit(self):
        with pytest.raises(InvalidInput):
            calculate_apy(41, 1000)

    def test_fractional_age_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_apy(25.5, 1000)
