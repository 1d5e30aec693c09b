"""
Resume Optimization Prompt Template

Asks the model to rewrite a resume for a job description and to answer
with a JSON object holding the rewritten resume and a change summary.
"""


def build_optimize_resume_prompt(base_resume: str, job_description: str) -> str:
    """
    Build the prompt for resume optimization.

    Args:
        base_resume: Candidate's current resume text
        job_description: Full text of the target job posting

    Returns:
        str: Formatted prompt string
    """
    return f"""You are an expert resume optimizer AI. Your task is to optimize a resume to match a job description.

Instructions:
1. Carefully analyze both the resume and job description
2. Identify key skills and requirements from the job description
3. Modify the resume to:
   - Highlight matching skills and experiences
   - Add relevant keywords from the job description
   - Improve formatting and clarity
   - Quantify achievements where possible
4. Create a bullet-point summary of changes made

Provide the output in this EXACT JSON format:
{{
  "optimizedResume": "The complete optimized resume with proper formatting",
  "changesSummary": "• Change 1: What was modified and why\\n• Change 2: Another modification and reasoning\\n• Change 3: Additional changes made"
}}

Resume to Optimize:
{base_resume}

Job Description to Target:
{job_description}

Remember: Ensure output is valid JSON and maintain professional formatting in the optimized resume."""
