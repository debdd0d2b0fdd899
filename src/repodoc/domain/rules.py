"""
Ordered rule tables driving conditional documentation content.

Every table is evaluated top to bottom and, unless stated otherwise, the
first matching rule wins. Keeping the order in data makes tie-breaks explicit.
"""
from typing import Callable, List, NamedTuple, Optional, Set, Tuple

from repodoc.domain.models import DependencyManifest, RepositorySnapshot

DEFAULT_INSTALL_COMMAND = "npm install"
DEFAULT_START_COMMAND = "npm start"
GENERIC_PROJECT_TYPE = "General Software Project"


class Rule(NamedTuple):
    predicate: Callable[[RepositorySnapshot], bool]
    effect: str


def dependency_names(manifest: Optional[DependencyManifest]) -> Set[str]:
    """Runtime dependency names; dev dependencies never drive detection."""
    if manifest is None:
        return set()
    return set(manifest.dependencies)


def _depends_on(*names: str) -> Callable[[RepositorySnapshot], bool]:
    def predicate(snapshot: RepositorySnapshot) -> bool:
        return not dependency_names(snapshot.manifest).isdisjoint(names)
    return predicate


def _samples_extension(extension: str) -> Callable[[RepositorySnapshot], bool]:
    def predicate(snapshot: RepositorySnapshot) -> bool:
        return any(f.extension == extension for f in snapshot.files)
    return predicate


# (dependency name, display label); all matches are collected, labels de-duplicated.
TECH_STACK_TABLE: Tuple[Tuple[str, str], ...] = (
    ("react", "React"),
    ("vue", "Vue.js"),
    ("angular", "Angular"),
    ("@angular/core", "Angular"),
    ("svelte", "Svelte"),
    ("next", "Next.js"),
    ("express", "Express.js"),
    ("tailwindcss", "Tailwind CSS"),
    ("typescript", "TypeScript"),
)

# Framework dependencies outrank file extension heuristics.
PROJECT_TYPE_RULES: Tuple[Rule, ...] = (
    Rule(_depends_on("react"), "React Web Application"),
    Rule(_depends_on("vue"), "Vue.js Application"),
    Rule(_depends_on("@angular/core", "angular"), "Angular Application"),
    Rule(_depends_on("express"), "Node.js/Express Server"),
    Rule(_samples_extension(".py"), "Python Application"),
    Rule(_samples_extension(".java"), "Java Application"),
)

UI_FRAMEWORK_TABLE: Tuple[Tuple[str, str], ...] = (
    ("react", "React"),
    ("vue", "Vue"),
    ("@angular/core", "Angular"),
    ("angular", "Angular"),
    ("svelte", "Svelte"),
)

PERSISTENCE_LIBRARIES = frozenset({
    "mongoose",
    "prisma",
    "@prisma/client",
    "sequelize",
    "typeorm",
    "knex",
    "mongodb",
    "pg",
    "mysql2",
    "sqlite3",
})

# (script name, command); scripts are looked up, never searched.
START_COMMAND_TABLE: Tuple[Tuple[str, str], ...] = (
    ("start", "npm start"),
    ("dev", "npm run dev"),
)

MAIN_FILE_MARKERS: Tuple[str, ...] = ("index", "main", "app")

SCRIPT_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx"})

REACT_SNIPPET = """import React from 'react';
import App from './App';

// Basic React component usage
function MyComponent() {
  return <App />;
}"""

VUE_SNIPPET = """import { createApp } from 'vue';
import App from './App.vue';

// Mount the root component
createApp(App).mount('#app');"""

EXPRESS_SNIPPET = """const express = require('express');

const app = express();

app.get('/', (req, res) => res.send('Hello World'));
app.listen(3000);"""

GENERIC_SNIPPET = """// Example usage based on code analysis
// Check individual files for specific implementation details"""

USAGE_SNIPPET_RULES: Tuple[Rule, ...] = (
    Rule(_depends_on("react"), REACT_SNIPPET),
    Rule(_depends_on("vue"), VUE_SNIPPET),
    Rule(_depends_on("express"), EXPRESS_SNIPPET),
)


def first_match(rules: Tuple[Rule, ...], snapshot: RepositorySnapshot, default: str) -> str:
    for rule in rules:
        if rule.predicate(snapshot):
            return rule.effect
    return default


def detect_tech_stack(manifest: Optional[DependencyManifest]) -> List[str]:
    names = dependency_names(manifest)
    stack: List[str] = []
    for dependency, label in TECH_STACK_TABLE:
        if dependency in names and label not in stack:
            stack.append(label)
    return stack


def classify_project(snapshot: RepositorySnapshot) -> str:
    return first_match(PROJECT_TYPE_RULES, snapshot, GENERIC_PROJECT_TYPE)


def detect_ui_framework(manifest: Optional[DependencyManifest]) -> Optional[str]:
    names = dependency_names(manifest)
    for dependency, label in UI_FRAMEWORK_TABLE:
        if dependency in names:
            return label
    return None


def has_persistence_layer(manifest: Optional[DependencyManifest]) -> bool:
    return not dependency_names(manifest).isdisjoint(PERSISTENCE_LIBRARIES)


def select_start_command(manifest: Optional[DependencyManifest]) -> str:
    scripts = manifest.scripts if manifest is not None else {}
    for script, command in START_COMMAND_TABLE:
        if script in scripts:
            return command
    return DEFAULT_START_COMMAND


def select_usage_snippet(snapshot: RepositorySnapshot) -> str:
    return first_match(USAGE_SNIPPET_RULES, snapshot, GENERIC_SNIPPET)
