from pydantic import BaseModel, Field


class DraftPatchSchema(BaseModel):
    unit_id: int | None = None
    meeting_room_id: int | None = None
    meeting_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    participant_count: int | None = None
    total_consumption: int | None = None
    consumption_ids: list[int] | None = None
    notes: str | None = None


class DraftSchema(BaseModel):
    unit_id: int | None = None
    meeting_room_id: int | None = None
    meeting_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    participant_count: int | None = None
    total_consumption: int | None = None
    consumption_ids: list[int] = Field(default_factory=list)
    notes: str | None = None


class FieldErrorSchema(BaseModel):
    code: str
    message: str


class PresentedErrorSchema(BaseModel):
    code: str
    title: str
    message: str
    icon_class: str


class AvailabilitySchema(BaseModel):
    status: str
    seq: int | None = None
    available: bool | None = None
    validations_passed: bool | None = None
    errors: list[PresentedErrorSchema] = Field(default_factory=list)


class SubmissionSchema(BaseModel):
    status: str
    booking_id: int | str | None = None


class DraftStateSchema(BaseModel):
    draft_id: str
    draft: DraftSchema
    field_errors: dict[str, list[FieldErrorSchema]] = Field(default_factory=dict)
    availability: AvailabilitySchema
    submission: SubmissionSchema
    errors: list[PresentedErrorSchema] = Field(default_factory=list)
    can_submit: bool
    room_capacity: str


class SubmitResponseSchema(BaseModel):
    booking_id: int | str


class UnitSchema(BaseModel):
    id: int
    name: str
    is_active: bool


class RoomSchema(BaseModel):
    id: int
    name: str
    capacity: int
    capacity_label: str
    is_active: bool


class ConsumptionSchema(BaseModel):
    id: int
    name: str
    is_active: bool


class MasterDataSchema(BaseModel):
    units: list[UnitSchema]
    rooms: list[RoomSchema]
    consumptions: list[ConsumptionSchema]


class BookingRowSchema(BaseModel):
    id: int | str
    unit: str | None = None
    meeting_room: str | None = None
    meeting_date: str
    time: str
    total_participants: int
    total_consumption: int
    notes: str | None = None


class PaginationSchema(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class BookingListSchema(BaseModel):
    bookings: list[BookingRowSchema]
    pagination: PaginationSchema
    pages: list[int | str]
