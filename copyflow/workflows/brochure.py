"""Built-in multi-section brochure workflow.

Each section is generated in turn, receiving the previous sections as context
so the brochure reads consistently.
"""

from __future__ import annotations

from .models import FieldCondition, StepField, WorkflowDefinition, WorkflowStep

SECTION_SEPARATOR = '\n\n<hr class="brochure-section-break" />\n\n'

_FULL_CASE_STUDY = FieldCondition(field_id="includeCaseStudy", value="Yes - Full case study")
_OTHER_PROOF = FieldCondition(field_id="includeCaseStudy", value="No - Other proof type")

COVER_STEP = WorkflowStep(
    id="cover",
    name="Cover/Title",
    description="The front cover that creates first impression and establishes brand identity",
    fields=[
        StepField(id="brochureTitle", label="Brochure Title", required=True, max_length=100),
        StepField(id="subtitle", label="Subtitle/Tagline", max_length=150),
        StepField(id="companyName", label="Company Name", required=True, max_length=100),
        StepField(
            id="coverTone",
            label="Tone",
            type="select",
            required=True,
            options=["Professional", "Bold", "Friendly", "Authoritative"],
        ),
    ],
)

HERO_STEP = WorkflowStep(
    id="hero",
    name="Hero/Introduction/Benefits",
    description="The opening section that hooks readers and communicates core value",
    fields=[
        StepField(
            id="mainValueProp",
            label="Main Value Proposition",
            type="textarea",
            required=True,
            max_length=500,
        ),
        StepField(id="keyBenefits", label="Key Benefits", type="textarea", required=True, max_length=400),
        StepField(id="targetAudience", label="Target Audience", required=True, max_length=200),
        StepField(
            id="emotionalAngle",
            label="Emotional Angle",
            type="select",
            required=True,
            options=["Trust", "Innovation", "Results", "Transformation"],
        ),
    ],
)

SOLUTIONS_STEP = WorkflowStep(
    id="solutions",
    name="Solutions/Features",
    description="Detailed breakdown of your product/service offerings",
    fields=[
        StepField(id="productServiceName", label="Product/Service Name", required=True, max_length=100),
        StepField(id="mainFeatures", label="Main Features", type="textarea", required=True, max_length=600),
        StepField(
            id="featureEmphasis",
            label="Feature Emphasis",
            type="select",
            required=True,
            options=["Technical specs", "User benefits", "Both"],
        ),
    ],
)

CASE_STUDY_STEP = WorkflowStep(
    id="caseStudy",
    name="Case Study/Proof",
    description="Social proof through customer success stories or data",
    fields=[
        StepField(
            id="includeCaseStudy",
            label="Include Case Study?",
            type="select",
            required=True,
            options=["Yes - Full case study", "No - Other proof type"],
        ),
        StepField(id="clientName", label="Client Name", max_length=100, conditional_on=_FULL_CASE_STUDY),
        StepField(
            id="challenge",
            label="Challenge",
            type="textarea",
            max_length=400,
            conditional_on=_FULL_CASE_STUDY,
        ),
        StepField(id="result", label="Result", type="textarea", max_length=400, conditional_on=_FULL_CASE_STUDY),
        StepField(
            id="proofType",
            label="Other Proof Type",
            type="textarea",
            max_length=500,
            conditional_on=_OTHER_PROOF,
        ),
    ],
)

CTA_STEP = WorkflowStep(
    id="cta",
    name="Call-to-Action",
    description="The closing section that drives reader to take action",
    fields=[
        StepField(id="primaryCTA", label="Primary CTA", required=True, max_length=100),
        StepField(
            id="urgencyLevel",
            label="Urgency Level",
            type="select",
            required=True,
            options=["High", "Medium", "Low"],
        ),
        StepField(
            id="contactMethod",
            label="Contact Method",
            type="select",
            required=True,
            options=["Phone", "Email", "Website", "Schedule demo"],
        ),
    ],
)

OTHER_STEP = WorkflowStep(
    id="other",
    name="Other",
    description="Custom section for additional content not covered by standard sections",
    fields=[
        StepField(id="sectionName", label="Section Name", required=True, max_length=50),
        StepField(id="sectionPurpose", label="Section Purpose", type="textarea", required=True, max_length=300),
        StepField(id="keyPoints", label="Key Points", type="textarea", required=True, max_length=600),
    ],
)

BROCHURE_WORKFLOW = WorkflowDefinition(
    kind="brochure-multi-section",
    name="Brochure Copy (Multi-Section)",
    steps=[COVER_STEP, HERO_STEP, SOLUTIONS_STEP, CASE_STUDY_STEP, CTA_STEP, OTHER_STEP],
    section_separator=SECTION_SEPARATOR,
)
