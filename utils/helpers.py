import bleach


def format_completion_date(date_obj):
    """'December 9, 2025' style, as printed on certificates."""
    return f"{date_obj.strftime('%B')} {date_obj.day}, {date_obj.year}"

def clean_text(value):
    """Strip markup and collapse whitespace in free text headed for a document."""
    if value is None:
        return ""
    cleaned = bleach.clean(str(value), tags=[], strip=True)
    # bleach escapes bare ampersands and brackets; the PDF wants the characters
    cleaned = cleaned.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")
    return " ".join(cleaned.split())

def completion_line_for(course):
    return f"for completing {course.title}"
