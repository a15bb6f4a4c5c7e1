from pydantic import BaseModel, Field
from typing import Optional, Union, Dict


# Every form field is optional at this layer; the workflows own the
# "required" checks so the visitor sees the same messages for missing
# and blank values.

class SendOtpRequest(BaseModel):
    email: Optional[str] = None


class EventRegistrationRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    profession: Optional[str] = None
    otp_code: Optional[str] = Field(None, alias="otpCode")

    class Config:
        validate_by_name = True


class VolunteerApplicationRequest(BaseModel):
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    age: Optional[Union[int, str]] = None
    profession: Optional[str] = None
    interest_area: Optional[str] = Field(None, alias="interestArea")
    experience: Optional[str] = None
    availability: Optional[str] = None
    why_volunteer: Optional[str] = Field(None, alias="whyVolunteer")
    skills: Optional[str] = None
    custom_answers: Optional[Dict[str, str]] = Field(None, alias="customAnswers")
    otp_code: Optional[str] = Field(None, alias="otpCode")

    class Config:
        validate_by_name = True


class TeacherApplicationRequest(BaseModel):
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[Union[int, str]] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    profession: Optional[str] = None
    education: Optional[str] = None
    meditation_experience: Optional[str] = Field(None, alias="meditationExperience")
    teaching_experience: Optional[str] = Field(None, alias="teachingExperience")
    why_teach: Optional[str] = Field(None, alias="whyTeach")
    availability: Optional[str] = None
    otp_code: Optional[str] = Field(None, alias="otpCode")

    class Config:
        validate_by_name = True


class TeacherEnrollmentRequest(TeacherApplicationRequest):
    name: Optional[str] = None
