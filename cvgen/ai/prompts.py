"""Prompt builders for job analysis, CV tailoring and cover letters."""

from __future__ import annotations

ANALYSIS_SYSTEM_PROMPT = """You are a career advisor analyzing how well a candidate fits a job.

**CRITICAL: You MUST respond with valid JSON matching the response schema. Use the EXACT field names. No markdown fences, no explanatory text.**

Consider:
1. Technical skills and their proficiency levels
2. Work experience relevance and seniority
3. Education background
4. Projects that demonstrate relevant abilities
5. Certifications that add value

Be realistic with the match score (0-100), not generous. If the match is not perfect,
suggest how the candidate can best present their existing experience.
"""

TAILORING_SYSTEM_PROMPT = """You are an expert resume writer. You produce a tailored resume in JSON Resume format.

CRITICAL RULES:
- NEVER invent or fabricate experience, education, skills, or achievements
- Only use information that exists in the original profile
- You may rephrase and emphasize existing content, but never add fictional content
- Quantify achievements only where data exists in the original profile
- Keep all dates, company names, and factual information accurate

===== RESPOND WITH ONLY THE JSON RESUME OBJECT. NO MARKDOWN FENCES, NO EXPLANATORY TEXT. =====
"""

COVER_LETTER_SYSTEM_PROMPT = """You are an expert cover letter writer. Write a compelling, personalized cover letter.

STRUCTURE:
1. Opening (1 paragraph): mention the specific role and company, show enthusiasm
2. Body (2-3 paragraphs): top qualifications with concrete evidence from the profile
3. Closing (1 paragraph): call to action and professional sign-off

CRITICAL RULES:
- NEVER fabricate experience, skills, or accomplishments
- Keep specific metrics and facts exactly as provided
- Stay under {max_words} words
- Return only the letter text, without a subject line or markdown
"""


def build_analysis_prompt(profile_json: str, job_description: str) -> str:
    """Build the user prompt for job analysis."""
    return f"""# CANDIDATE PROFILE (JSON Resume)

{profile_json}

---

# JOB DESCRIPTION

{job_description}

---

# INSTRUCTIONS

Analyze the candidate's fit for this role and provide:
- match_score: a match score from 0 to 100
- matching_skills: skills the candidate has that match the job
- missing_skills: skills the job requires that the candidate may lack or should highlight better
- relevant_experiences: relevant experiences from their background
- suggestions: actionable suggestions for tailoring their CV
- keywords_to_include: important keywords from the job description to include
"""


def build_tailoring_prompt(
    profile_json: str, job_description: str, analysis_json: str
) -> str:
    """Build the user prompt for CV tailoring."""
    return f"""# MASTER PROFILE (JSON Resume)

{profile_json}

---

# TARGET JOB DESCRIPTION

{job_description}

---

# JOB ANALYSIS

{analysis_json}

---

# INSTRUCTIONS

Create a tailored JSON Resume that:
1. Rewrites the summary to address the job requirements and highlight the most relevant qualifications
2. Reorders work experience to put the most relevant positions first
3. Adjusts work highlights to emphasize accomplishments relevant to this job
4. Prioritizes and reorders skills to put the most relevant ones first
5. Includes relevant projects that demonstrate required abilities
6. Incorporates keywords from the job description naturally
"""


def build_cover_letter_prompt(
    profile_json: str,
    job_title: str,
    company_name: str,
    job_description: str,
    cv_summary: str = "",
) -> str:
    """Build the user prompt for cover letter generation."""
    summary_section = ""
    if cv_summary:
        summary_section = f"""
---

# TAILORED CV SUMMARY

{cv_summary}
"""

    return f"""# TARGET JOB

**Company:** {company_name}
**Role:** {job_title}

## About the Role
{job_description}

---

# CANDIDATE PROFILE (JSON Resume)

{profile_json}
{summary_section}
---

# INSTRUCTIONS

Write a cover letter for the {job_title} position at {company_name}.
Only use information from the candidate's actual profile and make it
personal to {company_name}, not a generic letter.
"""
