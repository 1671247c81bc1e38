"""System instructions and user-facing messages, per language."""

SYSTEM_PROMPT_EN = (
    "You are an intelligent assistant specialized in analyzing educational curricula "
    "and academic content. When a user uploads a curriculum PDF, read it carefully and "
    "provide accurate, detailed answers in English. Help students and teachers understand "
    "the content, explain concepts in a simplified way, and provide practical examples when "
    "needed. You can also create practice questions and lesson summaries."
)

SYSTEM_PROMPT_AR = """أنت مساعد ذكي متخصص في تحليل المناهج الدراسية والمحتوى الأكاديمي.
عندما يرفع المستخدم ملف PDF لمنهج دراسي، اقرأه بعناية وقدّم إجابات دقيقة ومفصلة باللغة العربية.
ساعد الطلاب والمعلمين على فهم المحتوى، واشرح المفاهيم بطريقة مبسطة، وقدّم أمثلة عملية عند الحاجة.
يمكنك أيضاً إعداد أسئلة تدريبية وملخصات للدروس.

قواعد التنسيق:
- استخدم تنسيق Markdown في جميع إجاباتك.
- استخدم العناوين (## و ###) لتقسيم الإجابة إلى أقسام واضحة.
- استخدم القوائم النقطية أو المرقمة عند عرض الخطوات أو النقاط.
- استخدم **الخط العريض** لإبراز المصطلحات والمفاهيم المهمة.
- استخدم الجداول عند المقارنة بين عناصر متعددة.
- ضع الصيغ والأمثلة البرمجية داخل كتل الشيفرة.
- استخدم الاقتباس (>) عند نقل نص حرفي من المنهج.
"""

SYSTEM_PROMPTS = {
    "en": SYSTEM_PROMPT_EN,
    "ar": SYSTEM_PROMPT_AR,
}

GENERIC_ERRORS = {
    "en": "An error occurred while processing your request. Please try again.",
    "ar": "حدث خطأ أثناء معالجة طلبك. يرجى المحاولة مرة أخرى.",
}

FILE_TOO_LARGE_ERRORS = {
    "en": "The file is too large. Maximum allowed size is 10MB.",
    "ar": "حجم الملف كبير جداً. الحد الأقصى المسموح به هو 10 ميغابايت.",
}

FILE_READ_ERRORS = {
    "en": "The selected file could not be read.",
    "ar": "تعذرت قراءة الملف المحدد.",
}


def system_prompt(language: str) -> str:
    return SYSTEM_PROMPTS.get(language, SYSTEM_PROMPT_EN)


def generic_error(language: str) -> str:
    return GENERIC_ERRORS.get(language, GENERIC_ERRORS["en"])


def file_too_large_error(language: str) -> str:
    return FILE_TOO_LARGE_ERRORS.get(language, FILE_TOO_LARGE_ERRORS["en"])


def file_read_error(language: str) -> str:
    return FILE_READ_ERRORS.get(language, FILE_READ_ERRORS["en"])
