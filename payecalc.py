#!/usr/bin/env python3
#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#

#
# UK PAYE income tax and National Insurance calculator.
#


import argparse
import logging
import sys

import environ

from data.taxyears import provider
from paye.calculator import PayeCalculator, Period, TaxCalculation, weekly_breakdown
from paye.precision import format_currency
from paye.taxcode import describe
from paye.taxyear import UnknownTaxYear
from paye.validation import validate_input
from report import Report, TextReport


def write_report(result:TaxCalculation, report:Report, weekly:bool=False) -> None:
    report.start('PAYE calculation')

    report.write_heading(f'Tax year {result.tax_year}')
    report.write_paragraph(f'Tax code {result.tax_code}: {describe(result.tax_code.code)}')

    basis = 'cumulative' if result.cumulative else 'non-cumulative (Week1/Month1)'
    paragraph = f'{result.region_name} rates, {basis} basis.'
    if result.current_period is not None:
        paragraph += f'  Payslips after {result.current_period} are projected from it.'
    report.write_paragraph(paragraph)

    summary = result.annual_summary
    report.write_heading('Annual summary')
    report.write_table([
            ['Gross pay', summary.gross],
            ['Personal allowance', format_currency(result.personal_allowance)],
            ['Income tax', summary.total_income_tax],
            ['National Insurance', summary.total_ni],
            ['Take home pay', summary.net_annual],
        ],
        just='lr',
    )

    header = ['Period', 'Gross', 'Tax free', 'Taxable', 'Income tax', 'NI', 'Net pay']
    if weekly:
        report.write_heading('Weekly breakdown')
        rows = weekly_breakdown(result)
    else:
        report.write_heading('Monthly breakdown')
        rows = list(result.monthly_breakdown)
    report.write_table([list(row) for row in rows], header=header, just='rrrrrrr')

    report.write_heading('Income tax bands')
    report.write_table(
        [[b.name, f'{b.rate.normalize():f}%', b.amount, b.tax] for b in result.income_tax_bands.bands],
        header=['Band', 'Rate', 'Amount', 'Tax'],
        footer=['Total', '', result.income_tax_bands.total_amount, result.income_tax_bands.total_tax],
        just='lrrr',
    )

    report.write_heading('National Insurance bands')
    report.write_table(
        [[b.name, f'{b.rate.normalize():f}%', b.amount, b.tax] for b in result.ni_bands.bands],
        header=['Band', 'Rate', 'Earnings', 'NI'],
        footer=['Total', '', result.ni_bands.total_amount, result.ni_bands.total_tax],
        just='lrrr',
    )

    report.end()


def main():
    argparser = argparse.ArgumentParser(description='UK PAYE income tax and National Insurance calculator.')
    argparser.add_argument('-y', '--tax-year', metavar='TAX_YEAR', default=environ.tax_year, help=f'tax year in YYYY-YY format (default: {environ.tax_year})')
    argparser.add_argument('--cumulative', action=argparse.BooleanOptionalAction, default=True, help='cumulative (default) or Week1/Month1 basis')
    argparser.add_argument('-p', '--period', metavar='PERIOD', default=None, help='current pay period, e.g., M6 or W23')
    argparser.add_argument('--weekly', action='store_true', default=False, help='show a weekly breakdown')
    argparser.add_argument('-v', '--verbose', action='store_true', default=False, help='verbose output')
    argparser.add_argument('salary', metavar='SALARY', help='annual gross salary')
    argparser.add_argument('tax_code', metavar='TAX_CODE', nargs='?', default='', help='tax code (default: 1257L)')
    args = argparser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    validation = validate_input(args.salary, args.tax_code)
    if not validation:
        sys.stderr.write(f'warning: {validation.message}; using defaults\n\n')

    period = None
    if args.period is not None:
        try:
            period = Period.from_string(args.period)
        except ValueError as e:
            argparser.error(str(e))

    calculator = PayeCalculator(provider())
    try:
        result = calculator.calculate(args.salary, args.tax_code, args.cumulative, args.tax_year, period)
    except ValueError as e:
        argparser.error(f'invalid tax year {args.tax_year!r}: {e}')
    except UnknownTaxYear as e:
        argparser.error(str(e))

    write_report(result, TextReport(sys.stdout), weekly=args.weekly)


if __name__ == '__main__':
    main()
