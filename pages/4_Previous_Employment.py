#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import pandas as pd
import streamlit as st

import common
import environ

from paye.employment import Employment, detect_current_period, review_employments
from paye.precision import format_currency


common.set_page_config(
    page_title="Previous Employment",
    layout="centered",
    initial_sidebar_state="expanded",
)


st.title('Previous Employment')

st.markdown('''
Enter the pay and tax to date from every employment in the tax year, primary employment first.
Periods are written like `M1-M4` for months 1 to 4, or `W1-W20` for weeks 1 to 20.
The full allowance accrues up to the current period, regardless of gaps in employment.
''')


with st.sidebar:
    st.header("Parameters")
    st.text_input('New tax code:', value='1257L', max_chars=7, key='tax_code')
    tax_years = common.tax_years()
    index = tax_years.index(environ.tax_year) if environ.tax_year in tax_years else len(tax_years) - 1
    st.selectbox('Tax year:', tax_years, index=index, key='tax_year')


default_employments = pd.DataFrame({
    'Periods': ['M1-M4', 'M5-M6'],
    'Gross pay': [14000.0, 7000.0],
    'Tax paid': [1950.0, 1000.0],
    'Include': [True, True],
})

df = st.data_editor(
    default_employments,
    num_rows='dynamic',
    hide_index=True,
    column_config={
        'Periods': st.column_config.TextColumn(required=True),
        'Gross pay': st.column_config.NumberColumn(min_value=0, format="£%.2f", required=True),
        'Tax paid': st.column_config.NumberColumn(format="£%.2f", required=True),
        'Include': st.column_config.CheckboxColumn(default=True),
    },
    key='employments',
)

employments = [
    Employment(row['Gross pay'], row['Tax paid'], str(row['Periods'] or ''), bool(row['Include']))
    for _, row in df.iterrows()
    if pd.notna(row['Gross pay']) and pd.notna(row['Tax paid'])
]

try:
    period = detect_current_period(employments)
except ValueError as e:
    st.error(str(e))
    st.stop()

year_data = common.get_calculator().provider.get(st.session_state.tax_year)
review = review_employments(employments, st.session_state.tax_code, period, year_data)

st.subheader(f'Position at {period}')

col1, col2, col3 = st.columns(3)
col1.metric('Total pay', format_currency(review.total_gross_pay))
col2.metric('Tax paid', format_currency(review.total_tax_paid))
col3.metric('Expected tax', format_currency(review.expected_tax))

if review.difference > 0:
    st.success(f'Overpaid by {format_currency(review.difference)}.  {review.recommendation}')
elif review.difference < 0:
    st.warning(f'Underpaid by {format_currency(-review.difference)}.  {review.recommendation}')
else:
    st.info(review.recommendation)

common.page_end()
