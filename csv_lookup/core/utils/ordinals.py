def ordinal(number: int) -> str:
    """
    English ordinal for a 1-based position: 1 -> '1st', 12 -> '12th', 23 -> '23rd'.
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"
