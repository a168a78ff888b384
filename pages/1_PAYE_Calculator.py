#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import common
import environ

from paye.calculator import Period, PeriodType, weekly_breakdown
from paye.precision import format_currency
from paye.taxcode import describe
from paye.validation import validate_input, validate_period


common.set_page_config(
    page_title="PAYE Calculator",
    layout="wide",
    initial_sidebar_state="expanded",
)


st.title('PAYE Calculator')


#
# Parameters
#

with st.sidebar:
    st.header("Parameters")

    st.number_input('Annual salary:', value=50000, min_value=0, max_value=10_000_000, step=1000, key='salary')
    st.text_input('Tax code:', value='1257L', max_chars=7, key='tax_code',
        help='Leave empty for the default 1257L code.  See [tax codes](https://www.gov.uk/tax-codes).')

    tax_years = common.tax_years()
    index = tax_years.index(environ.tax_year) if environ.tax_year in tax_years else len(tax_years) - 1
    st.selectbox('Tax year:', tax_years, index=index, key='tax_year')

    st.toggle('Cumulative', value=True, key='cumulative',
        help='Off for the Week1/Month1 (non-cumulative) basis.  Codes ending in W1, M1 or with an X are always non-cumulative.')

    with st.expander('Current period', expanded=False):
        st.checkbox('Project payslips from the current period', value=False, key='use_current_period')
        st.radio('Pay frequency:', ['Monthly', 'Weekly'], horizontal=True, key='frequency')
        max_period = 12 if st.session_state.frequency == 'Monthly' else 52
        st.number_input('Current period:', value=1, min_value=1, max_value=max_period, step=1, key='period_number')


#
# Calculation
#

validation = validate_input(st.session_state.salary, st.session_state.tax_code)
if not validation:
    st.error(validation.message)
    st.stop()

current_period = None
if st.session_state.use_current_period:
    period_type = PeriodType.MONTH if st.session_state.frequency == 'Monthly' else PeriodType.WEEK
    validation = validate_period(int(st.session_state.period_number), max_period)
    if not validation:
        st.error(validation.message)
        st.stop()
    current_period = Period.create(period_type, int(st.session_state.period_number))

calculator = common.get_calculator()
result = calculator.calculate(
    st.session_state.salary,
    st.session_state.tax_code,
    st.session_state.cumulative,
    st.session_state.tax_year,
    current_period,
)


#
# Results
#

st.info(describe(result.tax_code.code))

common.summary_metrics(result)

st.caption(f'{result.region_name} rates.  Personal allowance {format_currency(result.personal_allowance)}.  '
           + ('Cumulative basis.' if result.cumulative else 'Week1/Month1 basis.'))

money = common.money_column

tab1, tab2, tab3 = st.tabs(['Monthly', 'Weekly', 'Bands'])

with tab1:
    df = common.breakdown_dataframe(result.monthly_breakdown, 'Month')
    st.dataframe(df, hide_index=True, use_container_width=True,
                 column_config={c: money for c in df.columns[1:]})
    common.breakdown_chart(df, 'Month')

with tab2:
    df = common.breakdown_dataframe(weekly_breakdown(result), 'Week')
    st.dataframe(df, hide_index=True, use_container_width=True,
                 column_config={c: money for c in df.columns[1:]})

with tab3:
    st.subheader('Income tax')
    df = common.bands_dataframe(result.income_tax_bands)
    st.dataframe(df, hide_index=True, use_container_width=True,
                 column_config={
                     'Rate': st.column_config.NumberColumn(format="%.0f%%"),
                     'Amount': money,
                     'Tax': money,
                 })
    st.subheader('National Insurance')
    df = common.bands_dataframe(result.ni_bands)
    st.dataframe(df, hide_index=True, use_container_width=True,
                 column_config={
                     'Rate': st.column_config.NumberColumn(format="%.0f%%"),
                     'Amount': money,
                     'Tax': money,
                 })

common.page_end()
