"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import FinanceEngineTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))

# Path to the project root (for reference files)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with the required structure:
    - input-parameters/testprogram/spec.json (from fixtures)
    - reference/*.json (symlinked from project)
    """
    temp_dir = tempfile.mkdtemp()

    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprogram'),
        os.path.join(input_params_dir, 'testprogram')
    )

    os.symlink(
        os.path.join(PROJECT_ROOT, 'reference'),
        os.path.join(temp_dir, 'reference')
    )

    yield temp_dir

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def tools(test_base_path):
    return FinanceEngineTools(test_base_path)


@pytest.fixture
def bare_tools(tmp_path):
    """Tools over a base path that has reference data but no programs."""
    os.symlink(os.path.join(PROJECT_ROOT, 'reference'), str(tmp_path / 'reference'))
    return FinanceEngineTools(str(tmp_path))


class TestPrograms:
    """Tests for program discovery."""

    def test_default_program_discovered(self, tools):
        assert tools.default_program == 'testprogram'
        data = tools.list_programs()
        assert data['available_programs'] == ['testprogram']
        assert data['tax_years'] == [2024, 2025, 2026]

    def test_reload_picks_up_new_program(self, tools, test_base_path):
        new_dir = os.path.join(test_base_path, 'input-parameters', 'second')
        os.makedirs(new_dir)
        with open(os.path.join(new_dir, 'spec.json'), 'w') as f:
            json.dump({"tax": {"grossAnnualIncome": 40000}}, f)
        try:
            result = tools.reload_programs()
            assert result['added'] == ['second']
            assert 'second' in tools.programs
        finally:
            shutil.rmtree(new_dir)

    def test_unknown_program(self, tools):
        result = tools.calculate_tax(program='missing')
        assert 'error' in result
        assert 'missing' in result['error']


class TestTaxTools:
    """Tests for the tax tools."""

    def test_calculate_tax_from_program(self, tools):
        result = tools.calculate_tax()
        assert result['gross_income'] == 150000
        assert result['income_tax'] == 52088.08
        assert result['solidarity_tax'] == 1767.59
        assert result['church_tax'] == 4167.05
        assert result['child_benefit_annual'] == 3060

    def test_explicit_arguments_override_program(self, tools):
        result = tools.calculate_tax(gross_annual_income=60000, tax_year=2025)
        assert result['income_tax'] == 14415.17
        # Church tax in BY still comes from the default program
        assert result['church_tax'] == 1153.21

    def test_named_program_kept_with_income_override(self, tools):
        result = tools.calculate_tax(program='testprogram', gross_annual_income=60000)
        assert result['gross_income'] == 60000
        assert result['tax_year'] == 2025
        assert result['church_tax'] == 1153.21
        assert result['child_benefit_annual'] == 3060

    def test_without_program_uses_arguments_only(self, bare_tools):
        result = bare_tools.calculate_tax(gross_annual_income=60000, tax_year=2025)
        assert result['church_tax'] == 0
        assert result['child_benefit_annual'] == 0
        assert 'error' in bare_tools.calculate_tax()

    def test_program_values_with_override(self, tools):
        result = tools.calculate_tax(program='testprogram', include_church_tax=False)
        assert result['church_tax'] == 0
        assert result['income_tax'] == 52088.08

    def test_monthly(self, tools):
        result = tools.calculate_tax(gross_annual_income=60000, tax_year=2025, monthly=True)
        assert result['gross_income'] == 5000

    def test_results_rounded(self, tools):
        result = tools.calculate_tax(gross_annual_income=60000, tax_year=2025)
        assert result['net_income'] == round(result['net_income'], 2)
        assert all(z['tax_amount_in_zone'] == round(z['tax_amount_in_zone'], 2)
                   for z in result['tax_zone_breakdown'])

    def test_invalid_income_returns_error(self, tools):
        result = tools.calculate_tax(gross_annual_income=-100)
        assert 'error' in result

    def test_unconfigured_year_returns_error(self, tools):
        result = tools.calculate_tax(gross_annual_income=50000, tax_year=2040)
        assert 'No income tax zones available for year 2040' in result['error']

    def test_capital_gains_tax(self, tools):
        result = tools.capital_gains_tax(11000)
        assert result['total_tax'] == 2637.5
        assert 'error' in tools.capital_gains_tax(-5)


class TestProjectionTools:
    """Tests for the projection tools."""

    def test_project_wealth_from_program(self, tools):
        result = tools.project_wealth()
        assert len(result['snapshots']) == 21
        assert result['summary']['years'] == 20
        assert result['snapshots'][0]['nominal_net_worth'] == 100000

    def test_project_wealth_explicit(self, tools):
        result = tools.project_wealth(
            monthly_investment_contribution=1000, expected_annual_return_pct=0,
            annual_inflation_pct=0, projection_years=10, include_snapshots=False
        )
        assert 'snapshots' not in result
        # 100,000 from the program plus 10 years of 12,000
        assert result['summary']['final_nominal_net_worth'] == 220000

    def test_project_wealth_without_program(self, bare_tools):
        result = bare_tools.project_wealth(
            monthly_investment_contribution=1000, expected_annual_return_pct=0,
            annual_inflation_pct=0, projection_years=10, include_snapshots=False
        )
        assert result['summary']['final_nominal_net_worth'] == 120000

    def test_project_wealth_rejects_horizon(self, tools):
        assert 'error' in tools.project_wealth(projection_years=80)

    def test_resolve_milestones(self, tools):
        result = tools.resolve_milestones(targets=[100000, 500000])
        assert result['milestones'][0]['year'] == 0
        assert result['milestones'][1]['label'] == '500K'

    def test_project_scenarios(self, tools):
        result = tools.project_scenarios(spread_pct=1)
        assert set(result) == {'bear', 'base', 'bull'}
        assert result['bear']['final_nominal_net_worth'] < result['bull']['final_nominal_net_worth']


class TestClosedFormTools:
    """Tests for the closed-form tools."""

    def test_future_value(self, tools):
        result = tools.future_value(10000, 500, 7, 30)
        assert result['future_value'] == 642887.27
        assert result['total_contributed'] == 190000

    def test_required_monthly_contribution(self, tools):
        assert tools.required_monthly_contribution(100000, 10000, 5, 10)['monthly_contribution'] == 554.62

    def test_years_to_double(self, tools):
        assert tools.years_to_double(8) == {'years': 9.0}
        assert 'error' in tools.years_to_double(0)

    def test_savings_rate(self, tools):
        result = tools.savings_rate(60000, 30000)
        assert result['savings_rate_pct'] == 50
        assert result['years_to_financial_independence'] == 10.24
        assert 'years_to_financial_independence' not in tools.savings_rate(60000, 70000)
        assert 'years_to_financial_independence' not in tools.savings_rate(60000, 60000)

    def test_debt_payoff(self, tools):
        assert tools.debt_payoff(20000, 5, 500)['months'] == 43.85
        never = tools.debt_payoff(20000, 5, 80)
        assert never['never'] is True
        assert never['months'] is None

    def test_years_to_target_uses_assumed_return(self, tools):
        assert tools.years_to_target(1000000, 50000, 1000) == {'years': 25}

    def test_blended_return(self, tools):
        assert tools.blended_return({'etf': 60, 'cash': 20, 'realEstate': 20}) == {'annual_return_pct': 5.2}

    def test_fire_targets(self, tools):
        result = tools.fire_targets(2000, current_savings=150000, monthly_contribution=1000)
        assert [t['variant'] for t in result['targets']] == ['lean', 'standard', 'fat', 'barista', 'coast']
        assert result['targets'][1]['target'] == 600000
        assert result['progress_pct'] == 25

    def test_fire_targets_without_expenses(self, tools):
        assert tools.fire_targets(0)['progress_pct'] == 0

    def test_lifestyle_goal_by_category(self, tools):
        result = tools.lifestyle_goal(10000, 5, category='watches')
        assert result['inflation_rate_pct'] == 8
        assert result['future_cost'] == 14693.28
        assert result['monthly_savings'] == 78.22

    def test_lifestyle_goal_explicit_rate(self, tools):
        result = tools.lifestyle_goal(100000, 10, category='watches', inflation_rate_pct=5)
        assert result['future_cost'] == 162889.46
        assert result['monthly_savings'] == 524.08

    def test_lifestyle_goal_errors(self, tools):
        assert 'error' in tools.lifestyle_goal(100000, 10)
        assert 'yachts' in tools.lifestyle_goal(100000, 10, category='spaceships')['error']
        assert 'error' in tools.lifestyle_goal(100000, 0, category='travel')
