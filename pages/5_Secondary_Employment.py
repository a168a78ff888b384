#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import common
import environ

from paye.precision import format_currency
from paye.scenarios import compare_secondary
from paye.taxcode import describe
from paye.validation import validate_input


common.set_page_config(
    page_title="Secondary Employment",
    layout="centered",
    initial_sidebar_state="expanded",
)


st.title('Secondary Employment')

st.markdown('''
Compare the tax on two jobs with the tax on the same income from a single employment.
The personal allowance normally goes to the primary job, while the second job gets a `BR`, `D0` or `D1` code.
''')


secondary_codes = ['BR', 'D0', 'D1', '0T']

with st.sidebar:
    st.header("Parameters")
    tax_years = common.tax_years()
    index = tax_years.index(environ.tax_year) if environ.tax_year in tax_years else len(tax_years) - 1
    st.selectbox('Tax year:', tax_years, index=index, key='tax_year')

col1, col2 = st.columns(2)
with col1:
    st.subheader('Primary')
    st.number_input('Annual salary:', value=50000, min_value=0, max_value=10_000_000, step=1000, key='primary_salary')
    st.text_input('Tax code:', value='1257L', max_chars=7, key='primary_code')
with col2:
    st.subheader('Secondary')
    st.number_input('Annual salary:', value=10000, min_value=0, max_value=10_000_000, step=1000, key='secondary_salary')
    st.selectbox('Tax code:', secondary_codes, key='secondary_code',
        format_func=lambda code: f'{code} - {describe(code)}')


for salary, tax_code in [
    (st.session_state.primary_salary, st.session_state.primary_code),
    (st.session_state.secondary_salary, st.session_state.secondary_code),
]:
    validation = validate_input(salary, tax_code)
    if not validation:
        st.error(validation.message)
        st.stop()

comparison = compare_secondary(
    common.get_calculator(),
    st.session_state.primary_salary,
    st.session_state.primary_code,
    st.session_state.secondary_salary,
    st.session_state.secondary_code,
    st.session_state.tax_year,
)

col1, col2, col3 = st.columns(3)
col1.metric('Combined income', format_currency(comparison.combined_salary))
col2.metric('Tax on both jobs', format_currency(comparison.total_tax))
col3.metric('Tax from a single source', format_currency(comparison.single_source_tax))

if comparison.difference > 0:
    st.warning(f'Separate employments pay {format_currency(comparison.difference)} more tax than a single source.  '
               'The excess is normally refunded after the end of the tax year.')
elif comparison.difference < 0:
    st.warning(f'Separate employments pay {format_currency(-comparison.difference)} less tax than a single source.  '
               'The shortfall is normally collected through a tax code adjustment or Self Assessment.')
else:
    st.success('Both employments together pay the right amount of tax.')

common.page_end()
