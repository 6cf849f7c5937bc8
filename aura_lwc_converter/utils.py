"""
Utility functions for the converter CLI.
"""

from .models import TransformedMarkup


def lwc_component_name(component_name: str) -> str:
    """AccountCard -> accountCard (LWC bundle names start lowercase)."""
    return component_name[:1].lower() + component_name[1:]


def print_banner():
    """Print the application banner."""
    print()
    print("=" * 60)
    print("  Aura -> LWC Markup Converter")
    print("=" * 60)
    print()


def print_summary(results: list):
    """Print a summary table of conversion results."""
    print("\n" + "=" * 70)
    print("CONVERSION SUMMARY")
    print("=" * 70)
    print(f"{'Component':<35} {'Status':<15} {'Time':<8} {'Warnings':<8}")
    print("-" * 70)
    for r in results:
        name = r["component"][:34]
        print(f"{name:<35} {r['status']:<15} {r['time']:<8} {r['warnings']:<8}")
    print("-" * 70)
    success = sum(1 for r in results if "Success" in r["status"])
    failed = len(results) - success
    print(f"Total: {len(results)} components | {success} success | {failed} failed")
    if results and all("Success" in r["status"] for r in results):
        print("\nAll components converted successfully!")
    print()


def _bullets(items) -> list:
    return [f"- {item}" for item in items] or ["- None"]


def build_conversion_notes(component_name: str, result: TransformedMarkup) -> str:
    """Render the manual-review notes for one converted component as Markdown."""
    lines = [f"# Conversion notes: {component_name}", ""]

    lines += [f"## Warnings ({len(result.warnings)})", ""]
    lines += _bullets(result.warnings)
    lines.append("")

    lines += ["## Components used", ""]
    lines += _bullets(f"`{c}`" for c in result.used_components)
    lines.append("")

    lines += ["## Template directives", ""]
    lines += _bullets(f"`{d}`" for d in result.used_directives)
    lines.append("")

    if result.detected_getters:
        lines += ["## Getters to implement", ""]
        for getter in result.detected_getters:
            lines.append(f"- `get {getter.name}()` from `{getter.expression}`")
        lines.append("")

    if result.lms_channels:
        lines += ["## Lightning Message Service", ""]
        for channel in result.lms_channels:
            role = "publisher only" if channel.is_publisher_only else f"subscriber -> `{channel.message_handler_name}`"
            scope = f", scope {channel.scope}" if channel.scope else ""
            lines.append(f"- `{channel.channel_name}` (`{channel.binding_id}`): {role}{scope}")
        lines.append("")

    if result.record_data_services:
        lines += ["## Record data (@wire(getRecord))", ""]
        for record in result.record_data_services:
            fields = ", ".join(record.fields) or "(none)"
            lines.append(
                f"- `{record.binding_id}` recordId `{record.record_id_binding}`, "
                f"mode {record.mode}, fields: {fields}"
            )
        lines.append("")

    if result.facet_contents:
        lines += ["## Slot content", ""]
        for facet in result.facet_contents:
            lines.append(f"### {facet.slot_name or '(unnamed)'}")
            lines += ["", "```html", facet.rendered_content, "```", ""]

    return "\n".join(lines).rstrip("\n") + "\n"
