"""
Framework reference tables - TOGAF ADM phases, eTOM process areas and
TM Forum SID entities.

The tables are plain data so an alternate policy can be loaded from JSON.
TOGAF phases are kept in ADM order; a phase's position is its ordinal.
"""

from pydantic import BaseModel, ConfigDict, Field


class FrameworkElement(BaseModel):
    """A named element of a reference framework."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    label: str


class TogafPhase(FrameworkElement):
    """A phase of the TOGAF Architecture Development Method."""


class EtomArea(FrameworkElement):
    """A level-0 process area of the eTOM business process framework."""


class SidGroup(FrameworkElement):
    """A domain grouping SID entities."""


class SidEntity(FrameworkElement):
    """An entity of the TM Forum Shared Information/Data model."""
    group_id: str = Field(default="common", alias="groupId")


TOGAF_PHASES: tuple[TogafPhase, ...] = (
    TogafPhase(id="Preliminary", label="Preliminary"),
    TogafPhase(id="A", label="Architecture Vision"),
    TogafPhase(id="B", label="Business Architecture"),
    TogafPhase(id="C", label="Information Systems Architecture"),
    TogafPhase(id="D", label="Technology Architecture"),
    TogafPhase(id="E", label="Opportunities & Solutions"),
    TogafPhase(id="F", label="Migration Planning"),
    TogafPhase(id="G", label="Implementation Governance"),
    TogafPhase(id="H", label="Architecture Change Management"),
)

ETOM_AREAS: tuple[EtomArea, ...] = (
    EtomArea(id="Strategy", label="Strategy, Infrastructure & Product"),
    EtomArea(id="Operations", label="Operations"),
    EtomArea(id="Fulfillment", label="Fulfillment"),
    EtomArea(id="Assurance", label="Assurance"),
    EtomArea(id="Billing", label="Billing & Revenue Management"),
)

SID_GROUPS: tuple[SidGroup, ...] = (
    SidGroup(id="customer", label="Customer Domain"),
    SidGroup(id="product", label="Product Domain"),
    SidGroup(id="service", label="Service Domain"),
    SidGroup(id="resource", label="Resource Domain"),
    SidGroup(id="support", label="Support & Assurance"),
    SidGroup(id="common", label="Common"),
)

SID_ENTITIES: tuple[SidEntity, ...] = (
    # Core
    SidEntity(id="Customer", label="Customer", group_id="customer"),
    SidEntity(id="Product", label="Product", group_id="product"),
    SidEntity(id="Service", label="Service", group_id="service"),
    SidEntity(id="Resource", label="Resource", group_id="resource"),
    SidEntity(id="Party", label="Party", group_id="customer"),
    SidEntity(id="Location", label="Location", group_id="common"),
    SidEntity(id="Agreement", label="Agreement", group_id="customer"),
    SidEntity(id="Order", label="Order", group_id="product"),
    # Customer domain
    SidEntity(id="CustomerAccount", label="Customer Account", group_id="customer"),
    SidEntity(id="CustomerBill", label="Customer Bill", group_id="customer"),
    SidEntity(id="CustomerInteraction", label="Customer Interaction", group_id="customer"),
    # Product domain
    SidEntity(id="ProductOffering", label="Product Offering", group_id="product"),
    SidEntity(id="ProductSpecification", label="Product Specification", group_id="product"),
    # Service domain
    SidEntity(id="ServiceSpecification", label="Service Specification", group_id="service"),
    SidEntity(id="ServiceOrder", label="Service Order", group_id="service"),
    SidEntity(id="ServiceProblem", label="Service Problem", group_id="support"),
    # Resource domain
    SidEntity(id="ResourceSpecification", label="Resource Specification", group_id="resource"),
    SidEntity(id="ResourceOrder", label="Resource Order", group_id="resource"),
    SidEntity(id="ResourceFunction", label="Resource Function", group_id="resource"),
    # Support / assurance
    SidEntity(id="TroubleTicket", label="Trouble Ticket", group_id="support"),
    SidEntity(id="WorkOrder", label="Work Order", group_id="support"),
    # Common
    SidEntity(id="Characteristic", label="Characteristic", group_id="common"),
    SidEntity(id="TimePeriod", label="Time Period", group_id="common"),
)


def sid_entities_in_group(group_id: str, entities=SID_ENTITIES) -> list[SidEntity]:
    """All SID entities belonging to a domain group."""
    return [e for e in entities if e.group_id == group_id]
