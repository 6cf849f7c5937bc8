# Aura to LWC Markup Converter
#
# Modules:
#   parser              - Aura .cmp markup parser
#   models              - Data models (source nodes, component metadata, transform result)
#   expression_parser   - Aura expression classifier -> LWC bindings and getters
#   extractors          - Side-channel configs (LMS channels, record data, slots)
#   mappings            - Component/attribute/slot lookup tables (YAML)
#   template_emitter    - LWC template text rendering
#   markup_transformer  - Recursive Aura -> LWC markup transformer
#   utils               - CLI utilities and review notes
