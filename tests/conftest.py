"""
Pytest fixtures shared by the test suite.

Sample Mermaid sources cover every dialect; FIXED_DOCUMENT pins the
document id and timestamp so XML output is reproducible.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import the package without installing it
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

FIXED_DOCUMENT = {"diagram_id": "diagram-test", "modified": "2024-01-01T00:00:00.000Z"}


@pytest.fixture
def fixed_document():
    return dict(FIXED_DOCUMENT)


@pytest.fixture
def flowchart_source():
    return (
        "flowchart TD\n"
        "    A([Start]) --> B{Is it valid?}\n"
        "    B -->|Yes| C[Process]\n"
        "    B -->|No| D[Reject]\n"
        "    C --> E([End])\n"
        "    D --> E\n"
    )


@pytest.fixture
def er_source():
    return (
        "erDiagram\n"
        "    CUSTOMER ||--o{ ORDER : places\n"
        "    ORDER ||--|{ LINE_ITEM : contains\n"
        "    CUSTOMER {\n"
        "        string name\n"
        "        int id PK\n"
        '        string email UK "login address"\n'
        "    }\n"
        "    ORDER {\n"
        "        int id PK\n"
        "        int customer_id FK\n"
        "    }\n"
    )


@pytest.fixture
def sequence_source():
    return (
        "sequenceDiagram\n"
        "    participant A as Alice\n"
        "    actor B as Bob\n"
        "    A->>+B: Hello Bob\n"
        "    B-->>-A: Hi Alice\n"
        "    Note right of A: Thinking\n"
        "    A-xB: Lost\n"
        "    A-)C: Spawn\n"
    )


@pytest.fixture
def class_source():
    return (
        "classDiagram\n"
        "    class Animal {\n"
        "        <<abstract>>\n"
        "        +String name\n"
        "        -int age\n"
        "        +makeSound() void\n"
        "        +move(int distance) : bool\n"
        "    }\n"
        "    class Dog\n"
        "    Animal <|-- Dog\n"
        "    Dog *-- Tail : has\n"
        "    Dog : +bark() void\n"
    )


@pytest.fixture
def mindmap_source():
    return (
        "mindmap\n"
        "  root((Project))\n"
        "    Goals\n"
        "      [Ship v1]\n"
        "      (Grow)\n"
        "    Risks\n"
        "      {{Budget}}\n"
        "      )Scope(\n"
    )


@pytest.fixture
def gitgraph_source():
    return (
        "gitGraph\n"
        "    commit\n"
        '    commit id: "feat-1" tag: "v1.0"\n'
        "    branch develop\n"
        "    commit\n"
        "    commit type: HIGHLIGHT\n"
        "    checkout main\n"
        "    merge develop\n"
        "    commit\n"
    )


@pytest.fixture
def all_sources(flowchart_source, er_source, sequence_source, class_source, mindmap_source, gitgraph_source):
    return {
        "flowchart": flowchart_source,
        "erDiagram": er_source,
        "sequence": sequence_source,
        "class": class_source,
        "mindmap": mindmap_source,
        "gitgraph": gitgraph_source,
    }
