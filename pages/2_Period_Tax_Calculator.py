#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import datetime

import pandas as pd
import streamlit as st

import common
import environ

from paye.calculator import Period, PeriodType
from paye.deductions import PensionScheme, period_pay
from paye.precision import format_currency
from paye.validation import validate_input, validate_period
from paye.verification import tax_period, verify_period
from tax.uk import TaxYear, student_loan_plans


common.set_page_config(
    page_title="Period Tax Calculator",
    layout="centered",
    initial_sidebar_state="expanded",
)


st.title('Period Tax Calculator')

st.markdown('Check the income tax deducted on a single payslip.')


with st.sidebar:
    st.header("Payslip")

    st.number_input('Gross pay:', value=3000.00, min_value=0.0, step=100.0, format='%.2f', key='earned',
        help='Pay for the period or, when cumulative, the pay to date.')
    st.text_input('Tax code:', value='1257L', max_chars=7, key='tax_code')
    st.toggle('Cumulative', value=True, key='cumulative')

    st.radio('Pay frequency:', ['Monthly', 'Weekly'], horizontal=True, key='frequency')
    period_type = PeriodType.MONTH if st.session_state.frequency == 'Monthly' else PeriodType.WEEK

    payment_date = st.date_input('Payment date:', value=None, key='payment_date',
        help='When given, the tax year and period are derived from it.')
    if payment_date is None:
        max_period = 12 if period_type is PeriodType.MONTH else 52
        st.number_input('Period:', value=1, min_value=1, max_value=max_period, step=1, key='period_number')
        validation = validate_period(int(st.session_state.period_number), max_period)
        if not validation:
            st.error(validation.message)
            st.stop()
        period = Period.create(period_type, int(st.session_state.period_number))
        tax_year = environ.tax_year
    else:
        assert isinstance(payment_date, datetime.date)
        period = tax_period(payment_date, period_type)
        tax_year = str(TaxYear.from_date(payment_date))
        st.caption(f'Tax year {tax_year}, period {period}.')

    st.divider()

    st.checkbox('Scottish taxpayer', value=False, key='scottish')
    st.checkbox('Over State Pension age', value=False, key='over_state_pension_age')
    st.selectbox('Student loan:', ['none'] + list(student_loan_plans), key='student_loan_plan')
    st.number_input('Pension contribution (%):', value=0.0, min_value=0.0, max_value=100.0, step=1.0, key='pension_percent')
    st.radio('Pension scheme:', [s.value for s in PensionScheme], horizontal=True, key='pension_scheme')


validation = validate_input(st.session_state.earned, st.session_state.tax_code)
if not validation:
    st.error(validation.message)
    st.stop()

calculator = common.get_calculator()

if tax_year not in common.tax_years():
    st.error(f'No tax data for tax year {tax_year}.')
    st.stop()

verification = verify_period(
    calculator,
    st.session_state.earned,
    st.session_state.tax_code,
    period,
    st.session_state.cumulative,
    tax_year,
)

st.subheader('Expected tax')

col1, col2, col3 = st.columns(3)
col1.metric('Tax free', format_currency(verification.tax_free))
col2.metric('Taxable', format_currency(verification.taxable))
col3.metric('Income tax', format_currency(verification.expected_tax))

if verification.k_code_capped:
    st.warning('Tax is limited to 50% of pay under the K code overriding limit.')

if verification.bands:
    st.dataframe(
        pd.DataFrame({
            'Band': [b.name for b in verification.bands],
            'Rate': [float(b.rate) for b in verification.bands],
            'Amount': [float(b.amount) for b in verification.bands],
            'Tax': [float(b.tax) for b in verification.bands],
        }),
        hide_index=True,
        column_config={
            'Rate': st.column_config.NumberColumn(format="%.0f%%"),
            'Amount': common.money_column,
            'Tax': common.money_column,
        },
    )

if not st.session_state.cumulative or period.number == 1:
    st.subheader('Payslip')

    payslip = period_pay(
        calculator,
        st.session_state.earned,
        st.session_state.tax_code,
        period,
        st.session_state.cumulative,
        tax_year,
        scottish=st.session_state.scottish,
        student_loan_plan=st.session_state.student_loan_plan,
        pension_percent=st.session_state.pension_percent,
        pension_scheme=st.session_state.pension_scheme,
        over_state_pension_age=st.session_state.over_state_pension_age,
    )

    st.dataframe(
        pd.DataFrame({
            'Item': ['Gross pay', 'Pension', 'Income tax', 'National Insurance', 'Student loan', 'Net pay'],
            'Amount': [float(x) for x in (payslip.gross, payslip.pension, payslip.income_tax, payslip.national_insurance, payslip.student_loan, payslip.net_pay)],
        }),
        hide_index=True,
        column_config={'Amount': common.money_column},
    )

common.page_end()
