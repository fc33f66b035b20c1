from rfcmail.models.address import Address, EmailAddress, Group, Mailbox, MessageId
from rfcmail.models.fields import (
    BccField,
    CcField,
    CommentsField,
    ContentDescriptionField,
    ContentDispositionField,
    ContentIdField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateField,
    Field,
    FromField,
    InReplyToField,
    KeywordsField,
    MessageIdField,
    MimeVersionField,
    Received,
    ReceivedAddress,
    ReceivedDomain,
    ReceivedWord,
    ReferencesField,
    ReplyToField,
    ReturnPath,
    SenderField,
    SubjectField,
    ToField,
    TraceField,
    UnknownField,
)
from rfcmail.models.mime import (
    Disposition,
    DispositionType,
    Entity,
    MediaType,
    MultipartEntity,
    RawEntity,
    TextEntity,
    TransferEncoding,
    UnknownEntity,
)
from rfcmail.models.time import Date, DateTime, Day, Month, Time, TimeWithZone, Zone

__all__ = [
    "EmailAddress",
    "Mailbox",
    "Group",
    "Address",
    "MessageId",
    "Day",
    "Month",
    "Zone",
    "Time",
    "TimeWithZone",
    "Date",
    "DateTime",
    "MediaType",
    "TransferEncoding",
    "DispositionType",
    "Disposition",
    "RawEntity",
    "TextEntity",
    "MultipartEntity",
    "UnknownEntity",
    "Entity",
    "Field",
    "DateField",
    "FromField",
    "SenderField",
    "ReplyToField",
    "ToField",
    "CcField",
    "BccField",
    "MessageIdField",
    "InReplyToField",
    "ReferencesField",
    "SubjectField",
    "CommentsField",
    "KeywordsField",
    "MimeVersionField",
    "ContentTypeField",
    "ContentTransferEncodingField",
    "ContentIdField",
    "ContentDescriptionField",
    "ContentDispositionField",
    "Received",
    "ReceivedWord",
    "ReceivedDomain",
    "ReceivedAddress",
    "ReturnPath",
    "TraceField",
    "UnknownField",
]
