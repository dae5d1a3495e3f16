import sys
import os
import json
import argparse
from dataclasses import asdict
from model.errors import EngineError
from model.inputs import projection_input_from_spec, tax_input_from_spec
from calc.take_home import TakeHomeCalculator, monthly_breakdown
from calc.assumptions import load_assumptions
from calc.projection_calculator import WealthProjectionCalculator
from calc.fire_calculator import FireCalculator

INPUT_PARAMETERS_PATH = os.path.join(os.path.dirname(__file__), '../input-parameters')

MODES = ('Tax', 'MonthlyTax', 'Projection', 'Milestones', 'Scenarios', 'Fire')


def load_spec(program_name: str) -> dict:
    spec_path = os.path.join(INPUT_PARAMETERS_PATH, program_name, 'spec.json')
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Spec file {spec_path} is not valid JSON: {e}")


def run_mode(mode: str, spec: dict):
    """Run one mode against a loaded spec and return a JSON-serializable result."""
    if mode in ('Tax', 'MonthlyTax'):
        result = TakeHomeCalculator.from_reference().calculate(tax_input_from_spec(spec))
        if mode == 'MonthlyTax':
            result = monthly_breakdown(result)
        return asdict(result)

    assumptions = load_assumptions()
    if mode == 'Fire':
        fire = spec.get('fire', {})
        projection = spec.get('projection', {})
        calculator = FireCalculator(assumptions)
        monthly_expenses = fire.get('monthlyExpenses', projection.get('monthlyExpenses', 0))
        savings = projection.get('currentCashSavings', 0) + projection.get('currentInvestments', 0)
        targets = calculator.fire_targets(
            monthly_expenses,
            current_savings=savings,
            monthly_contribution=projection.get('monthlyInvestmentContribution', 0),
            current_age=projection.get('startingAge', 30),
            part_time_monthly_income=fire.get('partTimeMonthlyIncome', 0),
            expected_return_pct=projection.get('expectedAnnualReturnPct')
        )
        return {
            'targets': [asdict(t) for t in targets],
            'progress_pct': calculator.fire_progress(savings - projection.get('currentDebt', 0), monthly_expenses)
        }

    calculator = WealthProjectionCalculator(assumptions)
    projection_input = projection_input_from_spec(spec)
    if mode == 'Scenarios':
        return {
            name: asdict(calculator.summarize(snapshots))
            for name, snapshots in calculator.project_scenarios(projection_input).items()
        }

    snapshots = calculator.project(projection_input)
    if mode == 'Milestones':
        return [
            {'target': m.target, 'label': m.label, 'year': m.year, 'age': m.age, 'reached': m.reached}
            for m in calculator.resolve_milestones(snapshots)
        ]
    return {
        'snapshots': [asdict(s) for s in snapshots],
        'summary': asdict(calculator.summarize(snapshots))
    }


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='German take-home pay and wealth projection calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Tax         Annual income tax, surcharges and social contributions (default)
  MonthlyTax  The same breakdown divided into monthly amounts
  Projection  Year-by-year net worth with a summary
  Milestones  First year each net-worth milestone is reached
  Scenarios   Bear, base and bull projection summaries
  Fire        FIRE targets and current progress

Examples:
  python src/Program.py example
  python src/Program.py example --mode Projection
  python src/Program.py example --mode Fire
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m', choices=MODES, default='Tax', help='Output mode: Tax (default)')
    args = parser.parse_args(argv)

    try:
        spec = load_spec(args.program_name)
    except (FileNotFoundError, ValueError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    try:
        output = run_mode(args.mode, spec)
    except EngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
