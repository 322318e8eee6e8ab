"""Landmark frame types and pose-model adapters."""
from .pose_landmarks import LandmarkFrame, LandmarkPoint, PoseIndex, frame_from_pose_result, to_landmark_point
