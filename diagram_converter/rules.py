"""
Conversion rules - reference text describing how each dialect is converted.

Served by the `rules` CLI command and the get_conversion_rules MCP tool.
The numbers here mirror the layout constants.
"""

GENERAL_RULES = """# Mermaid to Draw.io Conversion Rules

## Supported Diagram Types
- **flowchart** - Process flows and decision trees (`flowchart` / `graph`)
- **erDiagram** - Entity-relationship diagrams
- **sequence** - Sequence diagrams (`sequenceDiagram`)
- **class** - Class diagrams (`classDiagram`)
- **mindmap** - Mind maps
- **gitgraph** - Git commit graphs (`gitGraph`)

## General Rules
- The first non-blank line declares the diagram type
- Node IDs should be alphanumeric with underscores only
- Lines that cannot be parsed are skipped and reported by validation
- `style`, `classDef`, `click` and similar directives are ignored

## Shape Mappings
- `[]` rectangle -> Draw.io rectangle
- `()` rounded -> Draw.io rounded rectangle
- `{}` diamond -> Draw.io rhombus
- `([])` stadium -> Draw.io stadium shape
- `(())` circle -> Draw.io ellipse
- `[[]]` subroutine -> Draw.io process shape

## Edge Routing
- Edges use orthogonal routing with explicit exit and entry points
- Relationships whose endpoints are missing are dropped
"""

FLOWCHART_RULES = """# Flowchart Conversion Rules

## Terminal Nodes
- A node labelled "Start" is drawn as a green stadium
- A node labelled "End" or "Stop" is drawn as a red stadium
- Validation suggests adding both when they are missing

## Layout
- TD/TB/BT: vertical flow, 120px between nodes
- LR/RL: horizontal flow, 200px between nodes
- BT and RL reverse the order of nodes
- Nodes are 120x60

## Diamonds (Decisions)
- Size depends on label length:
  - Short (up to 15 chars): 120x80
  - Medium (16-30 chars): 160x100
  - Long (over 30 chars): 200x120
- Diamonds use overflow=hidden

## Edges
- `-->` arrow, `---` open line, `-.->` dotted arrow, `==>` thick arrow
- `-->|label|` adds a label
- Chained edges (`A --> B --> C`) create one edge per arrow
"""

ER_RULES = """# ER Diagram Conversion Rules

## Entity Layout (Grid)
- Columns: x = 40, 440, 840, 1240 (400px spacing, 4 columns)
- Rows: y = 40, 390, 740 ... (350px spacing)
- Entity width: 200px
- Entity height: 30px header + 22px per attribute

## Attributes
- `PK` attributes are underlined, `FK` attributes are italic
- Attribute order and constraints are kept as written

## Relationships
- Same row: horizontal exit and entry
- Same column: vertical exit and entry
- Diagonal: horizontal exit toward the target, vertical entry
- The corridor router adds waypoints through the gaps between entities
- Labels are offset 25px above the line

## Cardinality Symbols
- `||`: ERone (exactly one)
- `|o` / `o|`: ERzeroToOne (zero or one)
- `}|` / `|{`: ERoneToMany (one or many)
- `}o` / `o{`: ERzeroToMany (zero or many)
- `--` identifying, `..` non-identifying (dashed)
"""

SEQUENCE_RULES = """# Sequence Diagram Conversion Rules

## Syntax
```
sequenceDiagram
    participant A as Alice
    participant B as Bob
    A->>B: Hello
    B-->>A: Hi back
    Note right of A: This is a note
```

## Message Types
- `->>` / `->` solid line (sync)
- `-->>` / `-->` / `--x` / `--)` dashed line (async)
- `-x` lost message
- `-)` create message
- `+` / `-` after the arrow activate the target or deactivate the source

## Layout
- Participants: 100x50, 180px apart
- Lifelines: dashed vertical lines below participants
- Messages and notes share rows 60px apart
- Notes: placed right of, left of or over participants
- Activation bars follow activate/deactivate
"""

CLASS_RULES = """# Class Diagram Conversion Rules

## Syntax
```
classDiagram
    class Animal {
        +String name
        +int age
        +makeSound() void
    }
    Animal <|-- Dog
```

## Visibility Modifiers
- `+` Public (the default)
- `-` Private
- `#` Protected
- `~` Package

## Relationships
- `<|--` / `--|>` Inheritance
- `<|..` / `..|>` Realization
- `*--` / `--*` Composition
- `o--` / `--o` Aggregation
- `-->` / `<--` / `--` Association
- `..>` / `<..` / `..` Dependency

## Stereotypes
- `<<interface>>` Interface class (green)
- `<<abstract>>` Abstract class (purple)
- `<<enumeration>>` Enumeration (yellow)

## Layout
- Classes: 180px wide, 3 columns 250px apart
- Rows are at least 200px apart and grow with taller classes
"""

MINDMAP_RULES = """# Mindmap Conversion Rules

## Syntax
```
mindmap
    Root
        Branch 1
            Sub 1.1
            Sub 1.2
        Branch 2
            Sub 2.1
```

## Node Shapes
- Default: plain text
- `[text]` Square
- `(text)` Rounded
- `((text))` Circle
- `{{text}}` Hexagon
- `)text(` Cloud

## Layout (Radial)
- Canvas: 2400x1800 minimum, grown to fit every node
- Root: center of canvas
- Level 1: 350px from root
- Level 2: 280px from parent
- Level 3: 220px, level 4: 180px, deeper: 150px
- Overlapping nodes are pushed outward

## Node Sizes
- Root: 180x90
- Level 1: 160x70
- Level 2: 140x55
- Level 3+: 120x45
"""

GITGRAPH_RULES = """# Git Graph Conversion Rules

## Syntax
```
gitGraph
    commit
    commit id: "feat-1" tag: "v1.0"
    branch develop
    commit
    checkout main
    merge develop
```

## Commands
- `commit` - Add a commit to the current branch
- `commit id: "id"` - Commit with custom ID
- `commit tag: "tag"` - Commit with tag
- `commit type: HIGHLIGHT` - Commit type (NORMAL, REVERSE, HIGHLIGHT)
- `branch name` - Create and checkout branch
- `checkout name` / `switch name` - Switch to branch
- `merge name` - Merge branch into current

## Commit Colors
- `NORMAL` / `REVERSE` - blue
- `MERGE` - red
- `HIGHLIGHT` - green

## Layout
- Branches: 100px horizontal spacing
- Commits: 30px circles, 60px vertical spacing
- Branch colors: main (blue), develop (green), feature (yellow), hotfix (red), release (purple)
"""

RULES = {
    "general": GENERAL_RULES,
    "flowchart": FLOWCHART_RULES,
    "erDiagram": ER_RULES,
    "sequence": SEQUENCE_RULES,
    "class": CLASS_RULES,
    "mindmap": MINDMAP_RULES,
    "gitgraph": GITGRAPH_RULES,
}

_BY_LOWER = {key.lower(): text for key, text in RULES.items()}


def get_conversion_rules(diagram_type: str = "general") -> str:
    """Rules text for a diagram type; unknown names get the general rules."""
    key = (diagram_type or "general").strip().lower()
    return _BY_LOWER.get(key, GENERAL_RULES)
