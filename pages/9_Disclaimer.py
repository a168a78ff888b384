#
# Copyright (c) 2024 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import streamlit as st

import common


common.set_page_config(
    page_title="Disclaimer",
    layout="centered",
    initial_sidebar_state="expanded",
)

st.title('Disclaimer')

st.html("<style>.stMarkdown { text-align: justify; }</style>")

st.markdown('''
The figures produced by these calculators are estimates for general informational purposes only, and are not tax advice.

PAYE deductions depend on information held by HMRC and your employer which is not available here, such as benefits in kind, adjustments carried in your tax code, or changes of circumstances during the tax year.
Rates and thresholds are simplified where they changed part way through a tax year.

Always check your payslips and [personal tax account](https://www.gov.uk/personal-tax-account), and contact [HMRC](https://www.gov.uk/contact-hmrc) if you think your tax code is wrong.
''')

common.page_end()
