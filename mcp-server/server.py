#!/usr/bin/env python3
"""MCP Server for the Finance Engine.

This server exposes German take-home pay, wealth projection and closed-form
savings calculations as MCP tools, allowing AI assistants to answer
questions about a user's finances.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import FinanceEngineTools


# Create the MCP server
server = Server("finance-engine")

# Global tools instance (initialized on first call)
tools: FinanceEngineTools | None = None


def get_tools() -> FinanceEngineTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via FINANCE_ENGINE_PROGRAM env var
        default_program = os.environ.get('FINANCE_ENGINE_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = FinanceEngineTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters) supplying default inputs. Explicit arguments override it. Use list_programs to see available programs."
}


def number(description: str) -> dict:
    return {"type": "number", "description": description}


def integer(description: str) -> dict:
    return {"type": "integer", "description": description}


TAX_PROPERTIES = {
    "gross_annual_income": number("Gross annual income in euros"),
    "filing_status": {"type": "string", "enum": ["single", "married"], "description": "Filing status; married uses income splitting"},
    "number_of_children": integer("Number of children"),
    "include_church_tax": {"type": "boolean", "description": "Whether church tax applies"},
    "age": integer("Age of the filer"),
    "resident_region": {"type": "string", "description": "Two-letter German state code, e.g. BY or BE"},
    "tax_class": integer("Tax class 1-6"),
    "tax_year": integer("Fiscal year; defaults to the latest configured year"),
    "program": PROGRAM_PARAM,
}

PROJECTION_PROPERTIES = {
    "current_cash_savings": number("Cash savings today (held constant)"),
    "current_investments": number("Invested balance today"),
    "current_debt": number("Outstanding debt today"),
    "monthly_expenses": number("Monthly expenses (informational)"),
    "monthly_investment_contribution": number("Amount invested every month"),
    "monthly_debt_payment": number("Amount repaid on the debt every month"),
    "expected_annual_return_pct": number("Expected annual return in percent, e.g. 7"),
    "annual_inflation_pct": number("Annual inflation in percent, e.g. 2.5"),
    "projection_years": integer("Horizon in years (1-50)"),
    "starting_age": integer("Age at the start of the projection"),
    "program": PROGRAM_PARAM,
}


def schema(properties: dict, required: list | None = None) -> dict:
    return {"type": "object", "properties": properties, "required": required or []}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available finance engine tools."""
    return [
        Tool(
            name="list_programs",
            description="List the available input programs and configured tax years.",
            inputSchema=schema({})
        ),
        Tool(
            name="reload_programs",
            description="Reload all input programs from disk after adding, modifying, or removing spec.json files.",
            inputSchema=schema({})
        ),
        Tool(
            name="calculate_tax",
            description="Calculate German income tax, solidarity surcharge, church tax, social contributions, child benefit and net income for one fiscal year.",
            inputSchema=schema({
                **TAX_PROPERTIES,
                "monthly": {"type": "boolean", "description": "Return the breakdown divided into monthly amounts"}
            })
        ),
        Tool(
            name="capital_gains_tax",
            description="Calculate the flat tax and solidarity surcharge on capital gains after the saver's allowance.",
            inputSchema=schema({
                "gains": number("Realized capital gains in euros"),
                "filing_status": TAX_PROPERTIES["filing_status"],
                "tax_year": TAX_PROPERTIES["tax_year"],
            }, ["gains"])
        ),
        Tool(
            name="project_wealth",
            description="Project net worth year by year, nominal and inflation-adjusted, with a summary of contributions, growth and the debt-free year.",
            inputSchema=schema({
                **PROJECTION_PROPERTIES,
                "include_snapshots": {"type": "boolean", "description": "Include every yearly snapshot (default true)"}
            })
        ),
        Tool(
            name="resolve_milestones",
            description="Find the first year net worth reaches each milestone, e.g. 100K or 1M.",
            inputSchema=schema({
                **PROJECTION_PROPERTIES,
                "targets": {"type": "array", "items": {"type": "number"}, "description": "Optional: net-worth targets; defaults to 100K through 5M"}
            })
        ),
        Tool(
            name="project_scenarios",
            description="Compare bear, base and bull projections with the expected return shifted down and up.",
            inputSchema=schema({
                **PROJECTION_PROPERTIES,
                "spread_pct": number("Optional: percentage points subtracted and added to the return (default 2)")
            })
        ),
        Tool(
            name="future_value",
            description="Compound growth of a principal plus a monthly contribution.",
            inputSchema=schema({
                "principal": number("Starting balance"),
                "monthly_contribution": number("Monthly contribution"),
                "annual_rate_pct": number("Annual return in percent"),
                "years": number("Number of years"),
            }, ["principal", "monthly_contribution", "annual_rate_pct", "years"])
        ),
        Tool(
            name="required_monthly_contribution",
            description="Monthly contribution needed to reach a target balance in a given number of years.",
            inputSchema=schema({
                "target": number("Target balance"),
                "principal": number("Starting balance"),
                "annual_rate_pct": number("Annual return in percent"),
                "years": number("Number of years"),
            }, ["target", "principal", "annual_rate_pct", "years"])
        ),
        Tool(
            name="years_to_double",
            description="Rule of 72: years for money to double at a given annual return.",
            inputSchema=schema({"annual_rate_pct": number("Annual return in percent")}, ["annual_rate_pct"])
        ),
        Tool(
            name="savings_rate",
            description="Savings rate and, for a positive rate below 100 %, the years needed to save 25x annual expenses at that rate.",
            inputSchema=schema({
                "annual_income": number("Annual net income"),
                "annual_expenses": number("Annual expenses"),
            }, ["annual_income", "annual_expenses"])
        ),
        Tool(
            name="debt_payoff",
            description="Months needed to pay off a debt with a fixed monthly payment, or 'never' when the payment does not cover the interest.",
            inputSchema=schema({
                "debt": number("Outstanding balance"),
                "annual_rate_pct": number("Annual interest rate in percent"),
                "monthly_payment": number("Monthly payment"),
            }, ["debt", "annual_rate_pct", "monthly_payment"])
        ),
        Tool(
            name="years_to_target",
            description="Whole years until a balance with monthly contributions reaches a target.",
            inputSchema=schema({
                "target": number("Target balance"),
                "principal": number("Starting balance"),
                "monthly_contribution": number("Monthly contribution"),
                "annual_rate_pct": number("Optional: annual return in percent; defaults to the assumed return"),
            }, ["target", "principal", "monthly_contribution"])
        ),
        Tool(
            name="blended_return",
            description="Weighted annual return of a portfolio split across ETF, cash and real estate.",
            inputSchema=schema({
                "allocation": {
                    "type": "object",
                    "additionalProperties": {"type": "number"},
                    "description": "Asset class (etf, cash, realEstate) to portfolio share"
                }
            }, ["allocation"])
        ),
        Tool(
            name="lifestyle_goal",
            description="Future price of a lifestyle purchase (car, school, travel, art and similar) after category inflation, and the monthly saving that covers the increase.",
            inputSchema=schema({
                "current_cost": number("Price today in euros"),
                "years": number("Years until the purchase"),
                "category": {"type": "string", "description": "Optional: inflation category, e.g. supercars, privateSchool, travel, watches, art"},
                "inflation_rate_pct": number("Optional: annual price inflation in percent; overrides the category rate"),
            }, ["current_cost", "years"])
        ),
        Tool(
            name="fire_targets",
            description="FIRE numbers for lean, standard, fat, barista and coast FIRE with years to reach each, plus current progress.",
            inputSchema=schema({
                "monthly_expenses": number("Monthly expenses"),
                "current_savings": number("Current invested savings"),
                "monthly_contribution": number("Monthly savings contribution"),
                "current_age": integer("Current age"),
                "part_time_monthly_income": number("Part-time income for barista FIRE"),
                "expected_return_pct": number("Optional: annual return in percent"),
            }, ["monthly_expenses"])
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fe_tools = get_tools()
        arguments = dict(arguments or {})

        if name == "list_programs":
            result = fe_tools.list_programs()
        elif name == "reload_programs":
            result = fe_tools.reload_programs()
        elif name == "calculate_tax":
            result = fe_tools.calculate_tax(**arguments)
        elif name == "capital_gains_tax":
            result = fe_tools.capital_gains_tax(**arguments)
        elif name == "project_wealth":
            result = fe_tools.project_wealth(**arguments)
        elif name == "resolve_milestones":
            result = fe_tools.resolve_milestones(**arguments)
        elif name == "project_scenarios":
            result = fe_tools.project_scenarios(**arguments)
        elif name == "future_value":
            result = fe_tools.future_value(**arguments)
        elif name == "required_monthly_contribution":
            result = fe_tools.required_monthly_contribution(**arguments)
        elif name == "years_to_double":
            result = fe_tools.years_to_double(arguments["annual_rate_pct"])
        elif name == "savings_rate":
            result = fe_tools.savings_rate(arguments["annual_income"], arguments["annual_expenses"])
        elif name == "debt_payoff":
            result = fe_tools.debt_payoff(**arguments)
        elif name == "years_to_target":
            result = fe_tools.years_to_target(**arguments)
        elif name == "blended_return":
            result = fe_tools.blended_return(arguments["allocation"])
        elif name == "lifestyle_goal":
            result = fe_tools.lifestyle_goal(**arguments)
        elif name == "fire_targets":
            result = fe_tools.fire_targets(**arguments)
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
