
# GST basics and rate structure
GST_BASICS = [
    {
        "id": "gst_basics_2024",
        "content": "GST (Goods and Services Tax) is a comprehensive indirect tax on the supply of goods and services in India. "
                   "As of 2024, GST has four primary tax slabs: 0% (essential goods), 5% (common items), 12% and 18% (standard rates), "
                   "and 28% (luxury items). The composition scheme limit has been increased to ₹1.5 crore.",
        "tags": ["basics", "2024", "rates"],
    },
    {
        "id": "gst_rates_2024",
        "content": "GST Rate Structure 2024: "
                   "0% for essential goods, fresh food items and agricultural products. "
                   "5% for common use items, apparel below ₹1000 and packaged foods. "
                   "12% for processed foods, computers and mobile phones. "
                   "18% for most goods and services, AC restaurants and financial services. "
                   "28% for luxury goods, sin goods, premium cars and online gaming.",
        "tags": ["rates", "2024", "tax_slabs"],
    },
    {
        "id": "place_of_supply",
        "content": "Intra-state supply (seller and buyer in the same state) attracts CGST and SGST in equal halves. "
                   "Inter-state supply attracts IGST at the full rate. The place of supply decides which tax applies.",
        "tags": ["cgst", "sgst", "igst", "interstate"],
    },
]

# return filing deadlines and penalties
FILING_RULES = [
    {
        "id": "gstr1_deadline_2024",
        "content": "GSTR-1 must be filed by the 10th of the following month. It contains details of all outward supplies (sales) "
                   "made during the tax period. Late filing attracts a penalty of ₹50 per day (₹20 for nil returns).",
        "tags": ["gstr1", "deadline", "2024", "penalty"],
    },
    {
        "id": "gstr3b_deadline_2024",
        "content": "GSTR-3B must be filed by the 20th of the following month. It is a monthly summary return that includes "
                   "summary of outward supplies, input tax credit claimed, and tax payment details. Interest at 18% per annum on late payment.",
        "tags": ["gstr3b", "deadline", "2024", "interest"],
    },
    {
        "id": "gstr9_annual_return",
        "content": "GSTR-9 is the annual return consolidating the monthly and quarterly returns of the financial year. "
                   "It is due by 31st December following the end of the financial year.",
        "tags": ["gstr9", "annual", "deadline"],
    },
    {
        "id": "gst_payment_process",
        "content": "Tax is paid on the GST portal by creating a challan under Services > Payments. "
                   "Net banking, credit card, UPI and over-the-counter bank payments are accepted. "
                   "The challan identification number is quoted when filing GSTR-3B.",
        "tags": ["payment", "challan", "portal"],
    },
]

# credits, schemes and policy updates
POLICY_NOTES = [
    {
        "id": "itc_rules_2024",
        "content": "Input Tax Credit (ITC) can be claimed only if: 1) You possess a valid tax invoice 2) Goods/services have been received "
                   "3) Supplier has filed their returns 4) Tax has been paid to government. New 2024 rule: ITC claim period extended to 30 days "
                   "from date of invoice.",
        "tags": ["itc", "input tax credit", "2024", "rules"],
    },
    {
        "id": "new_tax_policies_2024",
        "content": "2024 GST Updates: 1) Composition scheme limit increased to ₹1.5 crore 2) Online gaming taxed at 28% 3) "
                   "Penalty relief for small taxpayers 4) Enhanced invoice matching system 5) E-invoicing mandatory for ₹5 crore+ turnover",
        "tags": ["2024", "updates", "policy", "changes"],
    },
    {
        "id": "composition_scheme",
        "content": "The composition scheme lets micro and small businesses pay tax at a flat rate on turnover instead of regular GST. "
                   "Composition dealers cannot collect tax from customers, cannot claim input tax credit and cannot make inter-state outward supplies.",
        "tags": ["composition", "micro", "small business"],
    },
    {
        "id": "hsn_sac_codes",
        "content": "HSN (Harmonized System of Nomenclature) codes classify goods and SAC (Services Accounting Code) classifies services. "
                   "The code printed on each invoice determines the applicable tax rate.",
        "tags": ["hsn", "sac", "classification"],
    },
]

# category name is added to each document's tags
KNOWLEDGE_CATEGORIES = {
    "gst_basics": GST_BASICS,
    "filing_rules": FILING_RULES,
    "policy_notes": POLICY_NOTES,
}
