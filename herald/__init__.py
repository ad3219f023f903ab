"""
HERALD - Highlighting Engine for Recruiting And Listing Descriptions

Annotates free-form job description text so the job board can highlight
salary, benefits, seniority, skills and culture language, and turn emails and
URLs into clickable targets.

Architecture:
- Annotation Context: Category registry, paragraph splitting and segmentation
- Rendering Context: Display primitives, HTML output and the highlight legend
"""

__version__ = "0.1.0"
