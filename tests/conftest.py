"""Shared fixtures: GOV.UK Content API payloads and a fake transport."""

import copy
import json
from pathlib import Path

import httpx
import pytest

from benefit_rates.core.models import ContentDocument, SourceDocuments

FIXTURES_DIR = Path(__file__).parent / "fixtures"

API_PREFIX = "/api/content"


def guide(*parts, title=""):
    """Content API payload for a multi-part guide."""
    return {
        "title": title,
        "details": {
            "parts": [
                {"slug": slug, "title": slug.replace("-", " ").capitalize(), "body": body}
                for slug, body in parts
            ]
        },
    }


def answer(body, title=""):
    """Content API payload for a single-body page."""
    return {"title": title, "details": {"body": body}}


ATTENDANCE_ALLOWANCE = guide(
    ("overview", "<p>Attendance Allowance helps with extra costs if you have a disability.</p>"),
    ("what-youll-get", """
<p>Attendance Allowance is paid at 2 different rates.</p>
<table>
<thead>
<tr>
<th>How often you need help</th>
<th>Weekly rate</th>
</tr>
</thead>
<tbody>
<tr>
<td>Lower rate - help with personal care during the day or at night</td>
<td>£73.90</td>
</tr>
<tr>
<td>Higher rate - help with personal care during the day and at night, or you're terminally ill</td>
<td>£110.40</td>
</tr>
</tbody>
</table>
"""),
    title="Attendance Allowance",
)

PENSION_CREDIT = guide(
    ("overview", "<p>Pension Credit gives you extra money to help with your living costs.</p>"),
    ("what-youll-get", """
<h2>Guarantee Credit</h2>
<p>Guarantee Credit tops up your weekly income to £227.10 if you're single.</p>
<p>If you have a partner, it tops up your joint weekly income to £346.60.</p>
<h2>Savings Credit</h2>
<p>You could get up to £17.30 Savings Credit a week if you're single.</p>
<p>If you have a partner, you could get up to £19.36 a week.</p>
<h2>If you have savings</h2>
<p>The first £10,000 in savings is ignored when working out your Pension Credit.</p>
"""),
    title="Pension Credit",
)

CARERS_ALLOWANCE = guide(
    ("overview", """
<p>You could get £83.30 a week if you care for someone at least 35 hours a week and they get certain benefits.</p>
"""),
    ("eligibility", """
<p>You can get Carer's Allowance if your earnings are £196 or less a week after tax and expenses.</p>
"""),
    title="Carer's Allowance",
)

CHILD_BENEFIT = guide(
    ("overview", "<p>You get Child Benefit if you're responsible for bringing up a child.</p>"),
    ("what-youll-get", """
<p>There are 2 Child Benefit rates.</p>
<table>
<thead>
<tr>
<th>Who the allowance is for</th>
<th>Rate (weekly)</th>
</tr>
</thead>
<tbody>
<tr>
<td>Eldest or only child</td>
<td>£26.05</td>
</tr>
<tr>
<td>Additional children</td>
<td>£17.25 per child</td>
</tr>
</tbody>
</table>
"""),
    title="Child Benefit",
)

CHILD_BENEFIT_TAX_CHARGE = answer("""
<p>You may have to pay a tax charge if your individual income is over £60,000 and you or your partner get Child Benefit.</p>
<p>If your income is £80,000 or more, the charge is equal to the amount of Child Benefit you get.</p>
""", title="High Income Child Benefit Charge")

PIP = guide(
    ("overview", "<p>Personal Independence Payment (PIP) can help with extra living costs.</p>"),
    ("how-much-youll-get", """
<table>
<thead>
<tr>
<th>Component</th>
<th>Lower weekly rate</th>
<th>Higher weekly rate</th>
</tr>
</thead>
<tbody>
<tr>
<th>Daily living part</th>
<td>£73.90</td>
<td>£110.40</td>
</tr>
<tr>
<th>Mobility part</th>
<td>£29.20</td>
<td>£77.05</td>
</tr>
</tbody>
</table>
"""),
    title="Personal Independence Payment (PIP)",
)

UNIVERSAL_CREDIT = guide(
    ("what-youll-get", """
<h2>Standard allowance</h2>
<table>
<thead>
<tr>
<th>Your circumstances</th>
<th>Monthly standard allowance</th>
</tr>
</thead>
<tbody>
<tr>
<td>Single and under 25</td>
<td>£316.98</td>
</tr>
<tr>
<td>Single and 25 or over</td>
<td>£400.14</td>
</tr>
<tr>
<td>Joint claimants (you and your partner), both under 25</td>
<td>£497.55</td>
</tr>
<tr>
<td>Joint claimants (you and your partner), one or both 25 or over</td>
<td>£628.10</td>
</tr>
</tbody>
</table>
<h2>Extra amounts</h2>
<table>
<thead>
<tr>
<th>How your circumstances affect your payment</th>
<th>Monthly amount</th>
</tr>
</thead>
<tbody>
<tr>
<td>First child (born before 6 April 2017)</td>
<td>£339.00</td>
</tr>
<tr>
<td>Second child and any other eligible children (per child)</td>
<td>£292.81</td>
</tr>
<tr>
<td>First child (born on or after 6 April 2017)</td>
<td>£292.81</td>
</tr>
<tr>
<td>Disabled child addition</td>
<td>£158.76 - the lower amount</td>
</tr>
<tr>
<td>Severely disabled child addition</td>
<td>£495.87 - the higher amount</td>
</tr>
<tr>
<td>If you have limited capability for work and work-related activity</td>
<td>£423.27</td>
</tr>
</tbody>
</table>
<h2>If you have savings</h2>
<p>If you have £16,000 or less in savings, investments or money, you may be able to get Universal Credit.</p>
<p>If you have more than £6,000 in savings, your payment will be reduced.</p>
<h2>Free school meals</h2>
<p>If your household income is less than £7,400 a year after tax, your children may get free school meals.</p>
"""),
    ("other-financial-support", """
<p>You could get an extra £201.68 a month if you care for a severely disabled person. This is called the carer element.</p>
<p>You can claim back up to 85% of childcare costs, up to £1,031.88 a month for one child or £1,768.94 for two or more children.</p>
"""),
    title="Universal Credit",
)

MATERNITY_ALLOWANCE = guide(
    ("what-youll-get", """
<p>You could get £187.18 a week or 90% of your average weekly earnings (whichever is less) for 39 weeks.</p>
"""),
    title="Maternity Allowance",
)

MARRIAGE_ALLOWANCE = guide(
    ("overview", """
<p>Marriage Allowance lets you transfer £1,260 of your Personal Allowance to your husband, wife or civil partner.</p>
<p>This reduces their tax by up to £252 in the tax year.</p>
"""),
    ("how-to-apply", """
<p>You can backdate your claim for up to 4 years if you were eligible.</p>
"""),
    title="Marriage Allowance",
)

BEREAVEMENT_SUPPORT = guide(
    ("what-youll-get", """
<table>
<thead>
<tr>
<th>Rate</th>
<th>First payment</th>
<th>Monthly payment</th>
</tr>
</thead>
<tbody>
<tr>
<th>Higher rate</th>
<td>£3,500</td>
<td>£350</td>
</tr>
<tr>
<th>Standard rate</th>
<td>£2,500</td>
<td>£100</td>
</tr>
</tbody>
</table>
<p>You'll get the monthly payments for up to 18 months.</p>
"""),
    title="Bereavement Support Payment",
)

STATE_PENSION = guide(
    ("what-youll-get", """
<p>The full new State Pension is £230.25 per week.</p>
<p>What you get depends on your National Insurance record.</p>
"""),
    title="The new State Pension",
)

PAGES = {
    "/attendance-allowance": ATTENDANCE_ALLOWANCE,
    "/pension-credit": PENSION_CREDIT,
    "/carers-allowance": CARERS_ALLOWANCE,
    "/child-benefit": CHILD_BENEFIT,
    "/child-benefit-tax-charge": CHILD_BENEFIT_TAX_CHARGE,
    "/pip": PIP,
    "/universal-credit": UNIVERSAL_CREDIT,
    "/maternity-allowance": MATERNITY_ALLOWANCE,
    "/marriage-allowance": MARRIAGE_ALLOWANCE,
    "/bereavement-support-payment": BEREAVEMENT_SUPPORT,
    "/new-state-pension": STATE_PENSION,
}


@pytest.fixture
def govuk_pages():
    """Fresh copy of the Content API payloads, keyed by GOV.UK path."""
    return copy.deepcopy(PAGES)


@pytest.fixture
def make_documents(govuk_pages):
    """Build SourceDocuments for an extractor from the page payloads."""
    def _make(path, optional_paths=(), pages=None):
        pages = pages if pages is not None else govuk_pages
        return SourceDocuments(
            primary=ContentDocument.from_api(path, pages[path]),
            optional={
                p: ContentDocument.from_api(p, pages[p])
                for p in optional_paths
                if p in pages
            },
        )
    return _make


@pytest.fixture
def content_api_transport():
    """
    Build an httpx.MockTransport serving Content API payloads.

    ``pages`` maps path -> payload dict, an int status code, or an
    exception instance to raise. Requested paths are recorded.
    """
    def _make(pages):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if path.startswith(API_PREFIX):
                path = path[len(API_PREFIX):]
            requested.append(path)

            page = pages.get(path, 404)
            if isinstance(page, Exception):
                raise page
            if isinstance(page, int):
                return httpx.Response(page, json={"error": "not found"})
            if isinstance(page, str):
                return httpx.Response(200, text=page)
            return httpx.Response(200, json=page)

        transport = httpx.MockTransport(handler)
        transport.requested = requested
        return transport
    return _make


@pytest.fixture
def rates_data():
    """Parsed contents of the fixture rate store."""
    with open(FIXTURES_DIR / "benefit-rates.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def rates_path(tmp_path, rates_data):
    """A writable copy of the fixture rate store."""
    path = tmp_path / "benefit-rates.json"
    path.write_text(json.dumps(rates_data, indent=2) + "\n", encoding="utf-8")
    return path
