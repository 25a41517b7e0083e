from soil_sage.schemas.report import MetricAverages, ResolvedTargets

# label, unit, low advice, high advice
_ADVICE = {
    "moisture": (
        "Soil moisture",
        "%",
        "Water more often or increase the amount per watering.",
        "Reduce watering and check that the soil drains well.",
    ),
    "sunlight": (
        "Sunlight",
        " lux",
        "Move the plant to a brighter spot or add grow lights.",
        "Provide partial shade during the brightest hours.",
    ),
    "temperature": (
        "Temperature",
        "°C",
        "Protect the plant from cold or move it somewhere warmer.",
        "Improve ventilation or shade the plant to cool it down.",
    ),
    "humidity": (
        "Humidity",
        "%",
        "Mist the leaves or group plants together to raise humidity.",
        "Increase air circulation to lower humidity.",
    ),
    "uv": (
        "UV index",
        "",
        "",
        "Shade the plant around midday to limit UV exposure.",
    ),
}


def _band_message(parameter: str, value: float, target: float, low: float | None, high: float | None) -> str | None:
    label, unit, low_advice, high_advice = _ADVICE[parameter]
    if low is not None and value < low:
        return f"{label} is below target ({value:.1f}{unit} vs {target:.1f}{unit}). {low_advice}"
    if high is not None and value > high:
        return f"{label} is above target ({value:.1f}{unit} vs {target:.1f}{unit}). {high_advice}"
    return None


def build_suggestions(averages: MetricAverages, targets: ResolvedTargets) -> list[str]:
    """One advisory per metric whose day average falls outside its band."""
    checks = []

    if targets.moisture_percent is not None:
        target = targets.moisture_percent
        checks.append(("moisture", averages.moisture_percent, target, target - 5, target + 5))
    if targets.sunlight_lux is not None:
        target = targets.sunlight_lux
        checks.append(("sunlight", averages.lux, target, target * 0.8, target * 1.2))
    if targets.temperature_c is not None:
        target = targets.temperature_c
        checks.append(("temperature", averages.temperature, target, target - 3, target + 3))
    if targets.humidity_percent is not None:
        target = targets.humidity_percent
        checks.append(("humidity", averages.humidity, target, target - 10, target + 10))
    if targets.uv_index is not None:
        target = targets.uv_index
        checks.append(("uv", averages.uv_index, target, None, target + 1))

    suggestions: list[str] = []
    for parameter, value, target, low, high in checks:
        if value is None:
            continue
        message = _band_message(parameter, value, target, low, high)
        if message:
            suggestions.append(message)

    return suggestions
