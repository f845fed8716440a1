# 확장자 → 언어 라벨 (대소문자 구분)
LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "js": "JavaScript",
    "ts": "TypeScript",
    "py": "Python",
    "rs": "Rust",
    "go": "Go",
    "java": "Java",
    "cpp": "C++",
    "cc": "C++",
    "cxx": "C++",
    "c": "C",
    "html": "HTML",
    "css": "CSS",
    "php": "PHP",
    "rb": "Ruby",
    "swift": "Swift",
    "kt": "Kotlin",
}

UNKNOWN_LANGUAGE = "Unknown"


def detect_language(file_path: str) -> str:
    """파일 경로의 마지막 '.' 뒤 확장자로 언어 라벨을 결정합니다.

    확장자가 없거나 표에 없으면 "Unknown"을 반환합니다.
    """
    if "." not in file_path:
        return UNKNOWN_LANGUAGE
    extension = file_path.rsplit(".", 1)[1]
    return LANGUAGE_BY_EXTENSION.get(extension, UNKNOWN_LANGUAGE)
