"""Company knowledge base: policies, services, market insights and FAQs.

Static for the lifetime of the process. Used to ground company and complex
answers, and as the local fallback when the language model is unavailable.
"""

import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

FOLLOW_UP_QUESTION = "Is there anything else you'd like to know?"


class PolicyEntry(BaseModel):
    kind: Literal["policy"] = "policy"
    category: str
    title: str
    description: str
    details: list[str]

    def searchable_text(self) -> list[str]:
        return [self.title, self.description, *self.details]


class ServiceEntry(BaseModel):
    kind: Literal["service"] = "service"
    name: str
    description: str
    features: list[str]
    pricing: Optional[str] = None
    duration: Optional[str] = None

    def searchable_text(self) -> list[str]:
        return [self.name, self.description, *self.features]


class MarketEntry(BaseModel):
    kind: Literal["market"] = "market"
    area: str
    average_price: str
    trend: Literal["rising", "stable", "declining"]
    insights: list[str]
    best_for: list[str]

    def searchable_text(self) -> list[str]:
        return [self.area, *self.insights, *self.best_for]


class FaqEntry(BaseModel):
    kind: Literal["faq"] = "faq"
    question: str
    answer: str
    category: str

    def searchable_text(self) -> list[str]:
        return [self.question, self.answer]


KnowledgeEntry = Annotated[
    Union[PolicyEntry, ServiceEntry, MarketEntry, FaqEntry],
    Field(discriminator="kind"),
]


class RankedEntry(BaseModel):
    entry: KnowledgeEntry
    score: int


class OfficeLocation(BaseModel):
    name: str
    address: str
    phone: str
    email: str


class BusinessInfo(BaseModel):
    hours: dict[str, str]
    emergency_contact: str
    languages: list[str]
    office_locations: list[OfficeLocation]


POLICIES: list[PolicyEntry] = [
    PolicyEntry(
        category="Property Viewing",
        title="Viewing Arrangements",
        description="Our comprehensive property viewing policy ensures a premium experience for all clients.",
        details=[
            "All viewings are by appointment only",
            "Minimum 24-hour advance booking required",
            "Professional agent accompanies all viewings",
            "Flexible scheduling including weekends and evenings",
            "Virtual tours available for international clients",
            "Group viewings can be arranged for families",
            "Follow-up consultation included after viewing",
        ],
    ),
    PolicyEntry(
        category="Pricing",
        title="Transparent Pricing Policy",
        description="We maintain transparent and competitive pricing across all our services.",
        details=[
            "No hidden fees or charges",
            "All prices quoted include applicable taxes",
            "Payment plans available for qualified buyers",
            "Professional valuation services included",
            "Market analysis provided with all listings",
            "Negotiation support included in our service",
            "Legal documentation assistance available",
        ],
    ),
    PolicyEntry(
        category="Client Service",
        title="Premium Client Experience",
        description="Our commitment to exceptional client service sets us apart in the luxury market.",
        details=[
            "Dedicated agent assigned to each client",
            "24/7 customer support hotline",
            "Multilingual support available",
            "Concierge services for property management",
            "Regular market updates and newsletters",
            "Exclusive access to off-market properties",
            "Post-purchase support and assistance",
        ],
    ),
    PolicyEntry(
        category="Investment",
        title="Investment Advisory Services",
        description="Expert guidance for property investment decisions in the Kenyan market.",
        details=[
            "Comprehensive market analysis provided",
            "ROI projections and investment modeling",
            "Portfolio diversification recommendations",
            "Tax optimization strategies",
            "Exit strategy planning",
            "Property management services available",
            "Regular performance reviews and updates",
        ],
    ),
]

SERVICES: list[ServiceEntry] = [
    ServiceEntry(
        name="Luxury Property Sales",
        description="Exclusive representation for high-end residential properties",
        features=[
            "Professional photography and virtual tours",
            "Targeted marketing to qualified buyers",
            "Negotiation and closing support",
            "Market analysis and pricing strategy",
            "Legal documentation assistance",
        ],
        pricing="Commission-based (3-5% of sale price)",
        duration="Typically 3-6 months",
    ),
    ServiceEntry(
        name="Premium Rental Services",
        description="Full-service rental management for luxury properties",
        features=[
            "Tenant screening and background checks",
            "Property marketing and showings",
            "Lease agreement preparation",
            "Monthly rent collection",
            "Property maintenance coordination",
        ],
        pricing="10-15% of monthly rental income",
        duration="Ongoing monthly service",
    ),
    ServiceEntry(
        name="Investment Consulting",
        description="Strategic advice for property investment portfolios",
        features=[
            "Market research and analysis",
            "Investment opportunity identification",
            "Risk assessment and mitigation",
            "Portfolio optimization strategies",
            "Performance tracking and reporting",
        ],
        pricing="Consultation fees vary by scope",
        duration="Project-based or ongoing retainer",
    ),
    ServiceEntry(
        name="Property Management",
        description="Comprehensive management services for property owners",
        features=[
            "Regular property inspections",
            "Maintenance and repair coordination",
            "Tenant relations management",
            "Financial reporting and accounting",
            "Emergency response services",
        ],
        pricing="8-12% of rental income",
        duration="Annual contracts with monthly billing",
    ),
]

MARKET_INSIGHTS: list[MarketEntry] = [
    MarketEntry(
        area="Westlands, Nairobi",
        average_price="KES 80-150 million",
        trend="rising",
        insights=[
            "Prime commercial and residential hub",
            "Excellent infrastructure and amenities",
            "High demand from expatriates and professionals",
            "Strong rental yields (6-8% annually)",
            "Proximity to business district drives value",
        ],
        best_for=["Investment properties", "Executive housing", "Commercial ventures"],
    ),
    MarketEntry(
        area="Karen, Nairobi",
        average_price="KES 100-300 million",
        trend="stable",
        insights=[
            "Prestigious residential area with large plots",
            "Excellent schools and healthcare facilities",
            "Strong expatriate community",
            "Consistent property value appreciation",
            "Low crime rates and gated communities",
        ],
        best_for=["Family homes", "Luxury estates", "Long-term investment"],
    ),
    MarketEntry(
        area="Naivasha Lakefront",
        average_price="KES 150-400 million",
        trend="rising",
        insights=[
            "Unique lakefront properties with scenic views",
            "Growing tourism and hospitality sector",
            "Limited supply drives premium pricing",
            "Popular for weekend homes and retreats",
            "Strong potential for vacation rental income",
        ],
        best_for=["Vacation homes", "Tourism investment", "Luxury retreats"],
    ),
    MarketEntry(
        area="Kilimani, Nairobi",
        average_price="KES 60-120 million",
        trend="rising",
        insights=[
            "Rapidly developing urban area",
            "High-rise apartments and modern developments",
            "Strong rental demand from young professionals",
            "Excellent public transport connectivity",
            "Growing commercial and entertainment options",
        ],
        best_for=["Rental investment", "Modern apartments", "Urban living"],
    ),
]

FAQS: list[FaqEntry] = [
    FaqEntry(
        question="What areas does Musili Homes specialize in?",
        answer=(
            "We specialize in luxury properties across Kenya's prime locations including "
            "Nairobi (Westlands, Karen, Kilimani, Lavington), Naivasha lakefront estates, "
            "Mombasa coastal properties, and select developments in Nakuru and Kisumu."
        ),
        category="General",
    ),
    FaqEntry(
        question="How do I schedule a property viewing?",
        answer=(
            "You can schedule a viewing by contacting our agents directly, using our online "
            "booking system, or speaking with our AI assistant. We require 24-hour advance "
            "notice and offer flexible scheduling including weekends."
        ),
        category="Viewing",
    ),
    FaqEntry(
        question="What is the typical price range for properties?",
        answer=(
            "Our luxury properties typically range from KES 50 million to KES 500 million, "
            "depending on location, size, and features. We also have exclusive ultra-luxury "
            "properties above this range for discerning clients."
        ),
        category="Pricing",
    ),
    FaqEntry(
        question="Do you offer financing assistance?",
        answer=(
            "Yes, we work with leading financial institutions to help clients secure "
            "competitive mortgage rates. We also offer guidance on payment plans and can "
            "connect you with our preferred banking partners."
        ),
        category="Financing",
    ),
    FaqEntry(
        question="What makes Musili Homes different from other real estate companies?",
        answer=(
            "Our focus on luxury properties, personalized service, extensive market knowledge, "
            "and commitment to transparency sets us apart. We provide comprehensive support "
            "from initial consultation through post-purchase services."
        ),
        category="General",
    ),
    FaqEntry(
        question="Can international clients purchase properties?",
        answer=(
            "Yes, we welcome international clients and provide specialized services including "
            "virtual tours, legal guidance for foreign ownership, currency exchange assistance, "
            "and property management services."
        ),
        category="International",
    ),
    FaqEntry(
        question="What ongoing support do you provide after purchase?",
        answer=(
            "We offer comprehensive post-purchase support including property management "
            "services, maintenance coordination, rental management, market updates, and "
            "assistance with any property-related needs."
        ),
        category="Support",
    ),
]

BUSINESS_INFO = BusinessInfo(
    hours={
        "weekdays": "8:00 AM - 6:00 PM",
        "saturday": "9:00 AM - 4:00 PM",
        "sunday": "By appointment only",
        "holidays": "Limited hours - call ahead",
    },
    emergency_contact="+254 700 123 456",
    languages=["English", "Swahili", "French", "German"],
    office_locations=[
        OfficeLocation(
            name="Nairobi Head Office",
            address="Musili Homes Tower, Westlands, Nairobi",
            phone="+254 700 123 456",
            email="nairobi@musilihomes.co.ke",
        ),
        OfficeLocation(
            name="Mombasa Branch",
            address="Nyali Bridge Plaza, Mombasa",
            phone="+254 700 123 457",
            email="mombasa@musilihomes.co.ke",
        ),
    ],
)


def score_entry(tokens: list[str], entry: KnowledgeEntry) -> int:
    """Count (field, token) pairs where the token occurs in the lower-cased field."""
    score = 0
    for text in entry.searchable_text():
        lower = text.lower()
        score += sum(1 for token in tokens if token in lower)
    return score


def format_entry(entry: KnowledgeEntry) -> str:
    """Render a knowledge entry as a chat response, ending with a follow-up question."""
    if isinstance(entry, FaqEntry):
        body = f"**{entry.question}**\n\n{entry.answer}"
    elif isinstance(entry, ServiceEntry):
        lines = [f"**{entry.name}**", "", entry.description, "", "**Features:**"]
        lines.extend(f"• {feature}" for feature in entry.features)
        if entry.pricing:
            lines.extend(["", f"**Pricing:** {entry.pricing}"])
        body = "\n".join(lines)
    elif isinstance(entry, PolicyEntry):
        lines = [f"**{entry.title}**", "", entry.description, "", "**Details:**"]
        lines.extend(f"• {detail}" for detail in entry.details)
        body = "\n".join(lines)
    else:
        lines = [
            f"**{entry.area} Market Insight**",
            "",
            f"• Average Price: {entry.average_price}",
            f"• Market Trend: {entry.trend}",
            "",
            "**Key Insights:**",
        ]
        lines.extend(f"• {insight}" for insight in entry.insights)
        body = "\n".join(lines)
    return f"{body}\n\n{FOLLOW_UP_QUESTION}"


class KnowledgeBase:
    """Keyword search over the static company corpus."""

    def __init__(
        self,
        policies: Optional[list[PolicyEntry]] = None,
        services: Optional[list[ServiceEntry]] = None,
        market_insights: Optional[list[MarketEntry]] = None,
        faqs: Optional[list[FaqEntry]] = None,
    ) -> None:
        self.policies = policies if policies is not None else POLICIES
        self.services = services if services is not None else SERVICES
        self.market_insights = market_insights if market_insights is not None else MARKET_INSIGHTS
        self.faqs = faqs if faqs is not None else FAQS

    def entries(self) -> list[KnowledgeEntry]:
        return [*self.policies, *self.services, *self.market_insights, *self.faqs]

    def search(self, query: str) -> list[RankedEntry]:
        """
        Rank entries by how many query tokens appear across their text fields.

        Entries scoring zero are dropped. Ties keep corpus order
        (policies, services, market insights, FAQs).
        """
        tokens = query.lower().split()
        if not tokens:
            return []
        ranked = []
        for entry in self.entries():
            score = score_entry(tokens, entry)
            if score > 0:
                ranked.append(RankedEntry(entry=entry, score=score))
        ranked.sort(key=lambda r: r.score, reverse=True)
        logger.debug("Knowledge search for %r returned %d entries", query[:80], len(ranked))
        return ranked

    def best_answer(self, query: str) -> Optional[str]:
        """Formatted top hit for ``query``, or None when nothing scores."""
        results = self.search(query)
        if not results:
            return None
        return format_entry(results[0].entry)

    def get_market_insights(self) -> list[MarketEntry]:
        return list(self.market_insights)

    def get_business_info(self) -> BusinessInfo:
        return BUSINESS_INFO
