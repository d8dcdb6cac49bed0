# Folder: copycat/workspace/
# File: __init__.py
from copycat.workspace.structure import StructureKind, combine_strengths
from copycat.workspace.description import Description
from copycat.workspace.objects import WorkspaceObject, Letter, Group
from copycat.workspace.bond import Bond
from copycat.workspace.concept_mapping import ConceptMapping
from copycat.workspace.correspondence import Correspondence
from copycat.workspace.replacement import Replacement
from copycat.workspace.rule import Rule
from copycat.workspace.workspace import Workspace, WorkspaceString
